"""Tests for the schema model and field classification."""

from datetime import datetime

import pytest

from schema_tsgen.schema import AUTO_ID_TYPE, Mixed, ObjectId, Schema, VirtualType, model
from schema_tsgen.types import (
    EnumDefinition,
    MixedDefinition,
    NestedDefinition,
    PrimitiveDefinition,
    PrimitiveType,
    ReferenceDefinition,
    SubdocumentDefinition,
    SubdocumentMarker,
    SuppressedDefinition,
    VirtualDefinition,
    classify_field,
    is_mixed,
    primitive_marker,
)


class TestSchemaTree:
    """Tests for building schema trees."""

    def test_automatic_paths(self):
        """Schemas get an _id path and an id virtual."""
        schema = Schema({"name": str})
        assert list(schema.tree) == ["name", "_id", "id"]
        assert schema.tree["_id"] == {"type": AUTO_ID_TYPE, "auto": True}
        assert isinstance(schema.tree["id"], VirtualType)

    def test_without_id(self):
        """Test a schema without the automatic _id."""
        schema = Schema({"name": str}, _id=False)
        assert list(schema.tree) == ["name"]

    def test_declared_id_kept(self):
        """Test that a declared _id replaces the automatic one."""
        schema = Schema({"_id": str})
        assert schema.tree["_id"] is str

    def test_model_adds_version_key(self):
        """Test that creating a model adds the version key."""
        schema = Schema({"name": str})
        user = model("User", schema)
        assert user.model_name == "User"
        assert user.schema is schema
        assert schema.tree["__v"] is int

    def test_model_without_version_key(self):
        """Test a model whose schema disables the version key."""
        schema = Schema({"name": str}, version_key=None)
        model("User", schema)
        assert "__v" not in schema.tree

    def test_array_shorthand_stored_as_options(self):
        """Test that [T] is stored in its option form."""
        schema = Schema({"tags": [str]})
        assert schema.tree["tags"] == {"type": [str]}
        assert schema.child_schemas == []

    def test_array_options_kept(self):
        """Test that array options are kept."""
        schema = Schema({"tags": {"type": [str], "required": True}})
        assert schema.tree["tags"] == {"type": [str], "required": True}

    def test_nested_object(self):
        """Test that nested objects are stored as sub-trees."""
        schema = Schema({"address": {"street": str, "city": {"type": str, "required": True}}})
        assert schema.tree["address"] == {"street": str, "city": {"type": str, "required": True}}

    def test_dotted_key(self):
        """Test that dotted keys build nested sub-trees."""
        schema = Schema({"name.first": str, "name.last": str})
        assert schema.tree["name"] == {"first": str, "last": str}

    def test_array_child(self):
        """Test recording an array of schemas as a child."""
        friend = Schema({"nickname": str})
        schema = Schema({"friends": [friend]})
        assert len(schema.child_schemas) == 1
        child = schema.child_schemas[0]
        assert child.path == "friends"
        assert child.schema is friend
        assert child.is_array is True
        assert schema.tree["friends"] == [friend]

    def test_array_child_in_options(self):
        """Test an array child given as an option."""
        friend = Schema({"nickname": str})
        schema = Schema({"friends": {"type": [friend]}})
        assert schema.child_schemas[0].is_array is True

    def test_single_child(self):
        """Test recording a schema value as a single child."""
        profile = Schema({"bio": str})
        schema = Schema({"profile": profile})
        child = schema.child_schemas[0]
        assert (child.path, child.is_array) == ("profile", False)

    def test_single_child_in_options(self):
        """Test a single child given as an option."""
        profile = Schema({"bio": str})
        schema = Schema({"profile": {"type": profile, "required": True}})
        child = schema.child_schemas[0]
        assert (child.path, child.is_array) == ("profile", False)

    def test_nested_child_path(self):
        """Test that children inside nested objects get a dotted path."""
        geo = Schema({"lat": float})
        schema = Schema({"address": {"geo": geo}})
        assert schema.child_schemas[0].path == "address.geo"
        assert schema.tree["address"]["geo"] is geo

    def test_implicit_array_child(self):
        """An array of plain field objects becomes a child schema."""
        schema = Schema({"tags": [{"label": str}]})
        child = schema.child_schemas[0]
        assert child.is_array is True
        assert list(child.schema.tree) == ["label", "_id", "id"]

    def test_reference_array_not_a_child(self):
        """Test that an array of references is not a child schema."""
        schema = Schema({"friends": [{"type": ObjectId, "ref": "User"}]})
        assert schema.child_schemas == []
        assert schema.tree["friends"] == {"type": [{"type": ObjectId, "ref": "User"}]}

    def test_virtual(self):
        """Test registering a virtual with a getter."""
        schema = Schema({"first": str})

        def full_name(doc):
            return doc.first

        virtual = schema.virtual("fullName").get(full_name)
        assert schema.tree["fullName"] is virtual
        assert virtual.getters == [full_name]
        assert schema.virtual("fullName") is virtual

    def test_dotted_virtual(self):
        """Test a virtual inside a nested object."""
        schema = Schema({"name": {"first": str}})
        schema.virtual("name.full")
        assert isinstance(schema.tree["name"]["full"], VirtualType)

    def test_function_registration(self):
        """Test registering methods, statics and query helpers as decorators."""
        schema = Schema({"name": str})

        @schema.method
        def is_admin(doc):
            return False

        @schema.static
        def find_admins(cls):
            return []

        @schema.query_helper
        def by_name(query, name):
            return query

        assert list(schema.methods) == ["is_admin"]
        assert list(schema.statics) == ["find_admins"]
        assert list(schema.query) == ["by_name"]

    def test_timestamps(self):
        """Test the paths and method added by timestamps."""
        schema = Schema({"name": str}, timestamps=True)
        assert schema.tree["createdAt"] == {"type": datetime}
        assert schema.tree["updatedAt"] == {"type": datetime}
        assert "initializeTimestamps" in schema.methods


class TestMarkers:
    """Tests for type marker helpers."""

    @pytest.mark.parametrize(
        "marker,expected",
        [
            (str, PrimitiveType.STRING),
            (int, PrimitiveType.NUMBER),
            (float, PrimitiveType.NUMBER),
            (bool, PrimitiveType.BOOLEAN),
            (datetime, PrimitiveType.DATE),
            (ObjectId, PrimitiveType.OBJECT_ID),
        ],
    )
    def test_primitive_marker(self, marker, expected):
        """Test the primitive type of each marker."""
        assert primitive_marker(marker) is expected

    def test_non_marker(self):
        """Test values that are not primitive markers."""
        assert primitive_marker("string") is None
        assert primitive_marker({"type": str}) is None
        assert primitive_marker(list) is None

    def test_is_mixed(self):
        """Test recognizing untyped markers."""
        assert is_mixed(Mixed)
        assert is_mixed(dict)
        assert is_mixed(object)
        assert not is_mixed({})
        assert not is_mixed(str)


class TestClassifyField:
    """Tests for classifying field tree nodes."""

    def test_bare_primitive(self):
        """Test a bare primitive marker."""
        spec = classify_field("age", int)
        assert spec.definition == PrimitiveDefinition(primitive=PrimitiveType.NUMBER)
        assert spec.is_optional is True
        assert spec.is_array is False

    def test_required(self):
        """Test a required option."""
        spec = classify_field("name", {"type": str, "required": True})
        assert spec.definition == PrimitiveDefinition(primitive=PrimitiveType.STRING)
        assert spec.is_optional is False

    def test_enum(self):
        """Test a string field with enum values."""
        spec = classify_field("status", {"type": str, "enum": ["active", "banned"]})
        assert spec.definition == EnumDefinition(values=["active", "banned"])

    def test_empty_enum_is_string(self):
        """Test that an empty enum is a plain string."""
        spec = classify_field("status", {"type": str, "enum": []})
        assert spec.definition == PrimitiveDefinition(primitive=PrimitiveType.STRING)

    def test_literal_list_always_present(self):
        """A literal list is never optional, whatever its element is."""
        spec = classify_field("scores", [int])
        assert spec.is_array is True
        assert spec.is_optional is False
        assert spec.definition == PrimitiveDefinition(primitive=PrimitiveType.NUMBER)

    def test_array_option(self):
        """Test an array given as an option."""
        spec = classify_field("tags", {"type": [str]})
        assert spec.is_array is True
        assert spec.is_optional is True
        assert spec.definition == PrimitiveDefinition(primitive=PrimitiveType.STRING)

    def test_array_option_required(self):
        """Test a required array option."""
        spec = classify_field("tags", {"type": [str], "required": True})
        assert spec.is_optional is False

    def test_array_of_references(self):
        """Element options are lifted and make the array required."""
        spec = classify_field("friends", {"type": [{"type": ObjectId, "ref": "User"}]})
        assert spec.definition == ReferenceDefinition(ref="User")
        assert spec.is_array is True
        assert spec.is_optional is False

    def test_array_of_enums(self):
        """Test that enum values are lifted from array elements."""
        spec = classify_field("roles", {"type": [{"type": str, "enum": ["admin", "user"]}]})
        assert spec.definition == EnumDefinition(values=["admin", "user"])
        assert spec.is_array is True

    def test_empty_array(self):
        """Test that an empty array holds Mixed values."""
        spec = classify_field("anything", [])
        assert spec.definition == MixedDefinition()
        assert spec.is_array is True

    def test_auto_id(self):
        """Test that the automatic _id is always present."""
        spec = classify_field("_id", {"type": AUTO_ID_TYPE, "auto": True})
        assert spec.definition == PrimitiveDefinition(primitive=PrimitiveType.OBJECT_ID)
        assert spec.is_optional is False

    def test_virtual(self):
        """Test that virtuals are always present."""
        spec = classify_field("fullName", VirtualType(path="fullName"))
        assert spec.definition == VirtualDefinition()
        assert spec.is_optional is False

    def test_id_virtual_suppressed(self):
        """Test that the id virtual is suppressed."""
        spec = classify_field("id", VirtualType(path="id"))
        assert spec.definition == SuppressedDefinition()

    @pytest.mark.parametrize("key", ["__v", "cast", "schemaName", "_checkRequired"])
    def test_meta_keys_suppressed(self, key):
        """Test that schema type internals are suppressed."""
        assert classify_field(key, int).definition == SuppressedDefinition()

    def test_reference(self):
        """Test a reference option."""
        spec = classify_field("author", {"type": ObjectId, "ref": "User"})
        assert spec.definition == ReferenceDefinition(ref="User")
        assert spec.is_optional is True

    def test_reference_to_model(self):
        """Test a reference given as a model."""
        user = model("User", Schema({"name": str}))
        spec = classify_field("author", {"type": ObjectId, "ref": user})
        assert spec.definition == ReferenceDefinition(ref="User")

    def test_mixed(self):
        """Test Mixed markers, bare and as an option."""
        assert classify_field("data", Mixed).definition == MixedDefinition()
        assert classify_field("data", {"type": dict}).definition == MixedDefinition()

    def test_nested(self):
        """Test that a plain dict is a nested object."""
        spec = classify_field("address", {"street": str})
        assert spec.definition == NestedDefinition(tree={"street": str})
        assert spec.is_optional is False

    def test_unknown_marker_is_empty_nested(self):
        """Test that an unknown marker becomes an empty object."""
        spec = classify_field("blob", bytes)
        assert spec.definition == NestedDefinition(tree={})

    def test_subdocument_marker(self):
        """Test a single sub-document marker."""
        spec = classify_field("profile", SubdocumentMarker(name="UserProfile"))
        assert spec.definition == SubdocumentDefinition(type_name="UserProfile", is_subdoc_array=False)
        assert spec.is_array is False

    def test_subdocument_array_marker(self):
        """Test an array sub-document marker."""
        spec = classify_field("friends", [SubdocumentMarker(name="UserFriend", is_array=True)])
        assert spec.definition == SubdocumentDefinition(type_name="UserFriend", is_subdoc_array=True)
        assert spec.is_array is True
        assert spec.is_optional is False

    def test_subdocument_marker_in_options(self):
        """Test that a marker given as an option type keeps the required flag."""
        spec = classify_field("profile", {"type": SubdocumentMarker(name="UserProfile"), "required": True})
        assert spec.definition == SubdocumentDefinition(type_name="UserProfile", is_subdoc_array=False)
        assert spec.is_optional is False

    def test_subdocument_marker_in_options_optional(self):
        """Test that a marker option without required stays optional."""
        spec = classify_field("profile", {"type": SubdocumentMarker(name="UserProfile")})
        assert spec.is_optional is True

    def test_value_not_modified(self):
        """Test that classification leaves the node untouched."""
        value = {"type": [{"type": ObjectId, "ref": "User"}], "validate": []}
        classify_field("friends", value)
        assert value == {"type": [{"type": ObjectId, "ref": "User"}], "validate": []}
