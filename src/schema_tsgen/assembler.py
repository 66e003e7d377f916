"""Assemble the generated declaration file."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from schema_tsgen.compiler import SchemaCompiler
from schema_tsgen.functions import FunctionTypes
from schema_tsgen.schema import Schema

MAIN_HEADER = (
    "/* tslint:disable */\n"
    "/* eslint-disable */\n\n"
    "// ######################################## THIS FILE WAS GENERATED BY SCHEMA-TSGEN"
    " ######################################## //\n\n"
    "// NOTE: ANY CHANGES MADE WILL BE OVERWRITTEN ON SUBSEQUENT EXECUTIONS OF SCHEMA-TSGEN.\n\n"
)
IMPORTS = 'import mongoose from "mongoose";\n'
MODULE_DECLARATION_HEADER = 'declare module "mongoose" {\n\n'
MODULE_DECLARATION_FOOTER = "}\n"


def compile_model(compiler: SchemaCompiler, model_name: str, schema: Schema, is_augmented: bool) -> str:
    """Compile the plain and document declarations of one root model."""
    interface_str = compiler.compile_schema(
        schema,
        model_name,
        add_model=True,
        is_document=False,
        header=f"interface {model_name} {{\n",
        footer="}\n\n",
        is_augmented=is_augmented,
    )
    interface_str += compiler.compile_schema(
        schema,
        model_name,
        add_model=True,
        is_document=True,
        header=f"type {model_name}Document = mongoose.Document & {model_name}Methods & {{\n",
        footer=f"}} & {model_name}\n\n",
        is_augmented=is_augmented,
    )
    return interface_str


def generate_file_string(
    schemas: Mapping[str, Schema],
    is_augmented: bool,
    imports: Iterable[str] | None = None,
    function_types: FunctionTypes | None = None,
) -> str:
    """Generate the full declaration file for a set of loaded schemas.

    Args:
        schemas: Schemas keyed by model name, in the order they were loaded.
        is_augmented: Wrap the declarations in a ``declare module`` block
            instead of exporting them.
        imports: Extra import lines to add after the default import.
        function_types: Externally inferred function signatures and virtual
            types (see ``SchemaCompiler``).

    Returns:
        The file contents.
    """
    compiler = SchemaCompiler(function_types)

    full_template = MAIN_HEADER
    full_template += IMPORTS
    full_template += "\n".join(imports or []) + "\n"

    if is_augmented:
        full_template += MODULE_DECLARATION_HEADER

    for model_name, schema in schemas.items():
        full_template += compile_model(compiler, model_name, schema, is_augmented)

    if is_augmented:
        full_template += MODULE_DECLARATION_FOOTER

    return full_template
