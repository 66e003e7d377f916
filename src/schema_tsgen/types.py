"""Field definitions for the schema_tsgen compiler.

A field tree node can take many shapes: a bare type marker, an options
dict, an array shorthand, a nested object, a virtual, or a marker for an
already-named sub-schema. ``classify_field`` turns one node into a
``FieldSpec`` so the compiler only has to render a closed set of variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from schema_tsgen.schema import AUTO_ID_TYPE, Mixed, ObjectId, Schema, VirtualType


class PrimitiveType(Enum):
    """Primitive field types and the declaration token each one renders to."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "Date"
    OBJECT_ID = "mongoose.Types.ObjectId"


# Python type markers accepted in field definitions
PRIMITIVE_MARKERS: dict[type, PrimitiveType] = {
    str: PrimitiveType.STRING,
    int: PrimitiveType.NUMBER,
    float: PrimitiveType.NUMBER,
    bool: PrimitiveType.BOOLEAN,
    datetime: PrimitiveType.DATE,
    date: PrimitiveType.DATE,
    ObjectId: PrimitiveType.OBJECT_ID,
}

# Markers meaning "any value"
MIXED_MARKERS: tuple[type, ...] = (Mixed, dict, object)

# Keys that belong to schema type internals rather than to the document
META_KEYS = frozenset(
    {
        "get",
        "set",
        "schemaName",
        "defaultOptions",
        "_checkRequired",
        "_cast",
        "checkRequired",
        "cast",
        "__v",
    }
)

# The virtual every document exposes as an alias of _id
ID_VIRTUAL = "id"


@dataclass(frozen=True)
class SubdocumentMarker:
    """Stands in for a sub-schema that was compiled into a named type."""

    name: str
    is_array: bool = False


class FieldDefinition:
    """Base class for classified field definitions."""


@dataclass
class PrimitiveDefinition(FieldDefinition):
    primitive: PrimitiveType


@dataclass
class EnumDefinition(FieldDefinition):
    """String field restricted to a set of values."""

    values: list[str] = field(default_factory=list)


@dataclass
class ReferenceDefinition(FieldDefinition):
    """Field holding the id of (or, once populated, a document of) another model."""

    ref: str


@dataclass
class VirtualDefinition(FieldDefinition):
    pass


@dataclass
class SubdocumentDefinition(FieldDefinition):
    type_name: str
    is_subdoc_array: bool = False


@dataclass
class NestedDefinition(FieldDefinition):
    """Inline object whose own fields are compiled in place."""

    tree: dict[str, Any] = field(default_factory=dict)


@dataclass
class MixedDefinition(FieldDefinition):
    pass


@dataclass
class SuppressedDefinition(FieldDefinition):
    """Field that produces no declaration line."""


@dataclass
class FieldSpec:
    """A classified field: its definition plus array and optional modifiers."""

    name: str
    definition: FieldDefinition
    is_array: bool = False
    is_optional: bool = True


def primitive_marker(value: Any) -> PrimitiveType | None:
    """Return the primitive type a bare marker stands for, if any."""
    if isinstance(value, type):
        return PRIMITIVE_MARKERS.get(value)
    return None


def is_mixed(value: Any) -> bool:
    """Check if a value marks an untyped field."""
    if isinstance(value, type) and value in MIXED_MARKERS:
        return True
    return getattr(value, "schema_name", None) == "Mixed"


def classify_field(key: str, value: Any) -> FieldSpec:
    """Classify one field tree node.

    The node itself is never modified; array and shortcut forms are
    unwrapped into copies.
    """
    value = _expand_shortcut(value)
    is_optional = not _option(value, "required")
    is_array = False

    if isinstance(value, list):
        # Literal lists hold sub-documents and are always present
        is_array = True
        is_optional = False
        value = _expand_shortcut(value[0]) if value else Mixed
    elif isinstance(value, dict) and isinstance(value.get("type"), list):
        elements = value["type"]
        value = dict(value)
        value["type"] = elements[0] if elements else Mixed
        is_array = True

        # {type: [{type: X, ref: ...}], validate: ...} validates both the
        # elements and the array, and implies the array is required.
        element = value["type"]
        if isinstance(element, dict) and "type" in element:
            for option in ("ref", "enum"):
                if option in element:
                    value[option] = element[option]
            value["type"] = element["type"]
            is_optional = False

    definition, always_present = _classify_definition(key, value)
    if always_present:
        is_optional = False
    return FieldSpec(name=key, definition=definition, is_array=is_array, is_optional=is_optional)


def _classify_definition(key: str, value: Any) -> tuple[FieldDefinition, bool]:
    """Return the definition for an unwrapped node and whether it is always present."""
    # Single children declared with options keep them, with the marker as type
    marker = value if isinstance(value, SubdocumentMarker) else _option(value, "type")
    if isinstance(marker, SubdocumentMarker):
        return SubdocumentDefinition(type_name=marker.name, is_subdoc_array=marker.is_array), False

    if isinstance(value, VirtualType):
        if key == ID_VIRTUAL:
            return SuppressedDefinition(), False
        return VirtualDefinition(), True

    if key in META_KEYS:
        return SuppressedDefinition(), False

    ref = _option(value, "ref")
    if ref:
        return ReferenceDefinition(ref=getattr(ref, "model_name", None) or str(ref)), False

    type_ = _option(value, "type")
    if is_mixed(value) or is_mixed(type_):
        return MixedDefinition(), False

    if type_ == AUTO_ID_TYPE:
        return PrimitiveDefinition(primitive=PrimitiveType.OBJECT_ID), True

    primitive = primitive_marker(type_)
    if primitive is PrimitiveType.STRING:
        enum_values = _option(value, "enum")
        if enum_values:
            return EnumDefinition(values=[str(v) for v in enum_values]), False
    if primitive is not None:
        return PrimitiveDefinition(primitive=primitive), False

    if isinstance(value, Schema):
        return NestedDefinition(tree=value.tree), True
    return NestedDefinition(tree=value if isinstance(value, dict) else {}), True


def _expand_shortcut(value: Any) -> Any:
    """Expand a bare primitive marker into an options dict."""
    if primitive_marker(value) is not None:
        return {"type": value, "required": False}
    return value


def _option(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        return value.get(name)
    return None
