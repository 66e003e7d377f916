"""Declarations for schema methods, statics and query helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from schema_tsgen.naming import make_line
from schema_tsgen.parsing import Signature, SignatureParser

# model name -> category ("methods", "statics", "query", "virtuals") -> member -> type
FunctionTypes = Mapping[str, Mapping[str, Mapping[str, str]]]

FunctionKind = Literal["methods", "statics", "query"]

# Used when no signature was inferred for a function
WILDCARD_SIGNATURE = "(...args: any[]) => any"

# Functions the document library attaches on its own
RESERVED_FUNCTIONS = frozenset({"initializeTimestamps"})

_parser: SignatureParser | None = None


def lookup_type(
    function_types: FunctionTypes | None, model_name: str, category: str, member: str
) -> str | None:
    """Look up an externally supplied type string, if there is one."""
    if not function_types:
        return None
    categories = function_types.get(model_name) or {}
    members = categories.get(category) or {}
    return members.get(member)


def parse_signature(text: str) -> Signature | None:
    """Parse a ``(params) => return_type`` signature."""
    global _parser
    if _parser is None:
        _parser = SignatureParser()
    return _parser.parse(text)


def format_functions(
    funcs: Mapping[str, Any],
    model_name: str,
    func_type: FunctionKind,
    function_types: FunctionTypes | None = None,
) -> str:
    """Render one generic call signature line per function.

    Every signature binds ``this`` to a type parameter constrained to the
    model's query, document or model type, so chained calls keep their
    concrete type. Query helpers always return that query type.
    """
    interface_string = ""

    for name in funcs:
        if name in RESERVED_FUNCTIONS:
            continue

        raw_signature = lookup_type(function_types, model_name, func_type, name) or WILDCARD_SIGNATURE
        signature = parse_signature(raw_signature) or parse_signature(WILDCARD_SIGNATURE)
        params = f", {signature.params}" if signature.params else ""

        if func_type == "query":
            key = f"{name}<Q extends mongoose.DocumentQuery<any, {model_name}Document, {{}}>>(this: Q{params})"
            value_type = "Q"
        elif func_type == "methods":
            key = f"{name}<D extends {model_name}Document>(this: D{params})"
            value_type = signature.return_type or "any"
        else:
            key = f"{name}<M extends {model_name}Model>(this: M{params})"
            value_type = signature.return_type or "any"

        interface_string += make_line(key, value_type)

    return interface_string
