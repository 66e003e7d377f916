"""Document schema model that declarations are generated from."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable


class ObjectId:
    """Marker for identifier-typed fields."""


class Mixed:
    """Marker for untyped fields."""

    schema_name = "Mixed"


# Type of the automatic _id path. Stored as a string so it can be told apart
# from a user-declared ObjectId field (the automatic id is always present).
AUTO_ID_TYPE = "ObjectId"


@dataclass
class VirtualType:
    """A computed property attached to a schema path."""

    path: str
    getters: list[Callable[..., Any]] = field(default_factory=list)
    setters: list[Callable[..., Any]] = field(default_factory=list)

    def get(self, fn: Callable[..., Any]) -> VirtualType:
        """Add a getter."""
        self.getters.append(fn)
        return self

    def set(self, fn: Callable[..., Any]) -> VirtualType:
        """Add a setter."""
        self.setters.append(fn)
        return self


@dataclass
class ChildSchema:
    """A sub-schema embedded at a dotted path of its parent."""

    path: str
    schema: Schema
    is_array: bool = False


class Schema:
    """Description of a document's fields, sub-schemas and functions.

    The ``tree`` keeps field definitions close to how they were declared.
    Sub-schemas (a ``Schema`` value, ``[Schema]``, ``{"type": Schema}`` or an
    array of plain field objects) are also recorded in ``child_schemas`` so
    they can be compiled into named types of their own.
    """

    def __init__(
        self,
        definition: dict[str, Any] | None = None,
        *,
        methods: dict[str, Callable[..., Any]] | None = None,
        statics: dict[str, Callable[..., Any]] | None = None,
        query: dict[str, Callable[..., Any]] | None = None,
        _id: bool = True,
        version_key: str | None = "__v",
        timestamps: bool = False,
    ) -> None:
        """Initialize a schema.

        Args:
            definition: Mapping of field names to field definitions.
            methods: Instance methods, keyed by name.
            statics: Static (model-level) functions, keyed by name.
            query: Query helpers, keyed by name.
            _id: Whether documents get an automatic ``_id`` path.
            version_key: Name of the version path added when a model is
                created from this schema, or None to disable it.
            timestamps: Whether to add ``createdAt``/``updatedAt`` paths.
        """
        self.tree: dict[str, Any] = {}
        self.child_schemas: list[ChildSchema] = []
        self.virtuals: dict[str, VirtualType] = {}
        self.methods: dict[str, Callable[..., Any]] = dict(methods or {})
        self.statics: dict[str, Callable[..., Any]] = dict(statics or {})
        self.query: dict[str, Callable[..., Any]] = dict(query or {})
        self.options: dict[str, Any] = {
            "_id": _id,
            "version_key": version_key,
            "timestamps": timestamps,
        }

        if definition:
            self.add(definition)

        if _id and "_id" not in self.tree:
            self.tree["_id"] = {"type": AUTO_ID_TYPE, "auto": True}
            self.virtual("id")

        if timestamps:
            self.add({"createdAt": {"type": datetime}, "updatedAt": {"type": datetime}})
            self.methods["initializeTimestamps"] = _initialize_timestamps

    def add(self, definition: dict[str, Any], prefix: str = "") -> Schema:
        """Add field definitions, walking nested objects with a dotted prefix."""
        for key, value in definition.items():
            path = prefix + key

            if isinstance(value, Schema):
                self._add_child(path, value, is_array=False)
                self._set_tree(path, value)
            elif isinstance(value, list):
                self._add_array(path, value, value)
            elif isinstance(value, dict) and "type" not in value:
                self._set_tree(path, {})
                if value:
                    self.add(value, prefix=path + ".")
            elif isinstance(value, dict):
                type_ = value["type"]
                if isinstance(type_, Schema):
                    self._add_child(path, type_, is_array=False)
                    self._set_tree(path, dict(value))
                elif isinstance(type_, list):
                    self._add_array(path, type_, value)
                else:
                    self._set_tree(path, dict(value))
            else:
                self._set_tree(path, value)
        return self

    def virtual(self, path: str) -> VirtualType:
        """Register a virtual at ``path`` and return it for adding getters/setters."""
        virtual = self.virtuals.get(path)
        if virtual is None:
            virtual = VirtualType(path=path)
            self.virtuals[path] = virtual
            self._set_tree(path, virtual)
        return virtual

    def method(self, fn: Callable[..., Any], name: str | None = None) -> Callable[..., Any]:
        """Register an instance method. Usable as a decorator."""
        self.methods[name or fn.__name__] = fn
        return fn

    def static(self, fn: Callable[..., Any], name: str | None = None) -> Callable[..., Any]:
        """Register a static function. Usable as a decorator."""
        self.statics[name or fn.__name__] = fn
        return fn

    def query_helper(self, fn: Callable[..., Any], name: str | None = None) -> Callable[..., Any]:
        """Register a query helper. Usable as a decorator."""
        self.query[name or fn.__name__] = fn
        return fn

    def _add_array(self, path: str, elements: list[Any], declared: Any) -> None:
        """Record an array path, creating a child schema for document arrays."""
        element = elements[0] if elements else None

        if isinstance(element, Schema):
            self._add_child(path, element, is_array=True)
            self._set_tree(path, [element])
        elif isinstance(element, dict) and element and "type" not in element:
            child = Schema(element, _id=self.options["_id"], version_key=None)
            self._add_child(path, child, is_array=True)
            self._set_tree(path, [child])
        elif isinstance(declared, dict):
            options = dict(declared)
            options["type"] = list(elements)
            self._set_tree(path, options)
        else:
            self._set_tree(path, {"type": list(elements)})

    def _add_child(self, path: str, schema: Schema, is_array: bool) -> None:
        self.child_schemas.append(ChildSchema(path=path, schema=schema, is_array=is_array))

    def _set_tree(self, path: str, value: Any) -> None:
        """Set a value at a dotted path of the tree, creating nested branches."""
        *parents, last = path.split(".")
        branch = self.tree
        for segment in parents:
            nested = branch.get(segment)
            if not isinstance(nested, dict):
                nested = {}
                branch[segment] = nested
            branch = nested
        branch[last] = value

    def __repr__(self) -> str:
        return f"Schema(paths={list(self.tree)!r})"


@dataclass
class Model:
    """A named model compiled from a schema."""

    model_name: str
    schema: Schema

    def __post_init__(self) -> None:
        version_key = self.schema.options.get("version_key")
        if version_key and version_key not in self.schema.tree:
            self.schema.tree[version_key] = int


def model(name: str, schema: Schema) -> Model:
    """Create a model from a schema."""
    return Model(model_name=name, schema=schema)


def _initialize_timestamps(document: Any) -> Any:
    return document
