"""Compile schemas into TypeScript declaration text."""

from __future__ import annotations

from typing import Any

from schema_tsgen.functions import FunctionTypes, format_functions, lookup_type
from schema_tsgen.naming import make_line, subdoc_name
from schema_tsgen.schema import ChildSchema, Schema
from schema_tsgen.types import (
    EnumDefinition,
    MixedDefinition,
    NestedDefinition,
    PrimitiveDefinition,
    ReferenceDefinition,
    SubdocumentDefinition,
    SubdocumentMarker,
    SuppressedDefinition,
    VirtualDefinition,
    classify_field,
)


class SchemaCompiler:
    """Compiler producing declaration text for schemas.

    Each schema compiles to two shapes: the plain shape (an interface with
    the document's data) and the document shape (a type alias for a live
    record, which intersects the plain interface with the document base type
    and the schema's methods). Sub-schemas are compiled first into named
    types of their own, which the parent then refers to.

    Schemas are never modified. Sub-schema names are passed to the parent's
    fields as ``SubdocumentMarker`` values in a copy of its field tree, so
    the same schema can be compiled any number of times.
    """

    def __init__(self, function_types: FunctionTypes | None = None) -> None:
        """Initialize a compiler.

        Args:
            function_types: Externally inferred signatures and virtual types,
                keyed by model name, then category, then member name.
        """
        self.function_types = function_types or {}

    def compile_schema(
        self,
        schema: Schema,
        model_name: str | None = None,
        *,
        is_document: bool,
        add_model: bool = False,
        header: str = "",
        footer: str = "",
        is_augmented: bool = False,
    ) -> str:
        """Compile one shape of a schema.

        Args:
            schema: The schema to compile.
            model_name: Name of the model or sub-document type. Sub-schemas
                are only compiled into named types when this is given.
            is_document: Compile the document shape instead of the plain shape.
            add_model: Also emit the Queries/Methods/Statics/Model interfaces
                (plain shape of a root model only).
            header: Text opening the declaration.
            footer: Text closing the declaration.
            is_augmented: Output goes inside a module augmentation block, so
                declarations are not exported.

        Returns:
            The declaration text.
        """
        return self._compile(
            schema.tree,
            schema=schema,
            model_name=model_name,
            ref_owner=model_name,
            is_document=is_document,
            add_model=add_model,
            header=header,
            footer=footer,
            is_augmented=is_augmented,
        )

    def _compile(
        self,
        tree: dict[str, Any],
        *,
        schema: Schema | None,
        model_name: str | None,
        ref_owner: str | None,
        is_document: bool,
        add_model: bool,
        header: str,
        footer: str,
        is_augmented: bool,
    ) -> str:
        template = ""

        if schema is not None and schema.child_schemas and model_name:
            for child in schema.child_schemas:
                name = subdoc_name(child.path, model_name)
                marker = SubdocumentMarker(name=name, is_array=child.is_array)
                declared = _lookup_path(tree, child.path)
                tree = _replace_path(tree, child.path, _subdocument_node(declared, marker))
                template += self._compile_child(child, name, is_document, is_augmented)

        if schema is not None and not is_document and model_name and add_model:
            template += self._model_interfaces(schema, model_name, is_augmented)

        if not is_augmented:
            header = "export " + header
        template += header

        for key, value in tree.items():
            template += self._parse_key(key, value, model_name, ref_owner, is_document)

        template += footer
        return template

    def _compile_child(self, child: ChildSchema, name: str, is_document: bool, is_augmented: bool) -> str:
        if is_document:
            # Array elements are embedded documents, which know their parent array
            base = "mongoose.Types.Embedded" if child.is_array else "mongoose.Document"
            header = f"type {name}Document = {base} & {{\n"
            footer = f"}} & {name}\n\n"
        else:
            header = f"interface {name} {{\n"
            footer = "}\n\n"

        return self._compile(
            child.schema.tree,
            schema=child.schema,
            model_name=name,
            ref_owner=name,
            is_document=is_document,
            add_model=False,
            header=header,
            footer=footer,
            is_augmented=is_augmented,
        )

    def _model_interfaces(self, schema: Schema, model_name: str, is_augmented: bool) -> str:
        """Render the Queries, Methods, Statics and Model interfaces of a root model."""
        export = "" if is_augmented else "export "
        template = ""

        template += f"{export}interface {model_name}Queries {{\n"
        template += format_functions(schema.query, model_name, "query", self.function_types)
        template += "}\n\n"

        template += f"{export}interface {model_name}Methods {{\n"
        template += format_functions(schema.methods, model_name, "methods", self.function_types)
        template += "}\n\n"

        template += f"{export}interface {model_name}Statics {{\n"
        template += format_functions(schema.statics, model_name, "statics", self.function_types)
        template += "}\n\n"

        model_extend = f"mongoose.Model<{model_name}Document, {model_name}Queries>"
        template += f"{export}interface {model_name}Model extends {model_extend}, {model_name}Statics {{}}\n\n"
        return template

    def _parse_key(
        self,
        key: str,
        value: Any,
        model_name: str | None,
        ref_owner: str | None,
        is_document: bool,
    ) -> str:
        """Render the declaration line of one field, or "" if it has none."""
        spec = classify_field(key, value)
        definition = spec.definition
        is_optional = spec.is_optional

        if isinstance(definition, SubdocumentDefinition):
            value_type = definition.type_name + ("Document" if is_document else "")
        elif isinstance(definition, VirtualDefinition):
            if not is_document:
                return ""
            value_type = self._virtual_type(model_name, key)
        elif isinstance(definition, SuppressedDefinition):
            return ""
        elif isinstance(definition, ReferenceDefinition):
            value_type = self._reference_type(definition.ref, ref_owner, is_document)
        elif isinstance(definition, MixedDefinition):
            if not is_document:
                return ""
            value_type = "any"
        elif isinstance(definition, (PrimitiveDefinition, EnumDefinition)):
            # Document types get primitives from the plain interface they intersect
            if is_document:
                return ""
            if isinstance(definition, EnumDefinition):
                value_type = '"' + '" | "'.join(definition.values) + '"'
            else:
                value_type = definition.primitive.value
        elif isinstance(definition, NestedDefinition):
            value_type = self._compile(
                definition.tree,
                schema=None,
                model_name=None,
                ref_owner=ref_owner,
                is_document=is_document,
                add_model=False,
                header="{\n",
                footer="}",
                is_augmented=True,
            )
        else:
            return ""

        if not value_type:
            return ""

        if spec.is_array:
            if is_document:
                is_subdoc_array = isinstance(definition, SubdocumentDefinition) and definition.is_subdoc_array
                wrapper = "mongoose.Types.DocumentArray" if is_subdoc_array else "mongoose.Types.Array"
                value_type = f"{wrapper}<{value_type}>"
            else:
                # A space most likely means a union; keep it together under []
                if " " in value_type:
                    value_type = f"({value_type})"
                value_type = f"{value_type}[]"

        return make_line(key, value_type, is_optional)

    def _virtual_type(self, model_name: str | None, key: str) -> str:
        if not model_name:
            return "any"
        return lookup_type(self.function_types, model_name, "virtuals", key) or "any"

    def _reference_type(self, ref: str, ref_owner: str | None, is_document: bool) -> str:
        """Render the identity-or-document union of a reference field."""
        doc_ref = ref.replace("'", "", 1)
        if "." in doc_ref:
            doc_ref = subdoc_name(doc_ref)

        if is_document:
            # A type may not index itself (`UserDocument["_id"]` inside
            # UserDocument), so self references take _id from the plain type.
            id_source = doc_ref if doc_ref == ref_owner else f"{doc_ref}Document"
            return f'{id_source}["_id"] | {doc_ref}Document'
        return f'{doc_ref}["_id"] | {doc_ref}'


def _replace_path(tree: dict[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a copy of ``tree`` with ``value`` set at the dotted ``path``."""
    head, _, rest = path.partition(".")
    replaced = dict(tree)
    if rest:
        branch = tree.get(head)
        replaced[head] = _replace_path(branch if isinstance(branch, dict) else {}, rest, value)
    else:
        replaced[head] = value
    return replaced


def _lookup_path(tree: dict[str, Any], path: str) -> Any:
    """Return the node at the dotted ``path`` of ``tree``, or None."""
    node: Any = tree
    for segment in path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(segment)
    return node


def _subdocument_node(declared: Any, marker: SubdocumentMarker) -> Any:
    """Node standing in for a compiled child, keeping the options it was declared with."""
    if marker.is_array:
        return [marker]
    if isinstance(declared, dict):
        return {**declared, "type": marker}
    return marker
