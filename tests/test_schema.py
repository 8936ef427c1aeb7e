"""Tests for schema reference resolution and schema-to-type conversion."""

import pytest

from sdkgen.core.types import ArrayType, MapType, Member, Primitive, PrimitiveType, RecordType, UnionType
from sdkgen.errors import InvalidReferenceError, UnresolvableReferenceError, UnsupportedSchemaError
from sdkgen.parser.schema import (
    UNNAMED,
    ResolvedSchema,
    SchemaConverter,
    SchemaReference,
    resolve_schema,
)

STRING = PrimitiveType(primitive=Primitive.STRING)
INTEGER = PrimitiveType(primitive=Primitive.INTEGER)

_PET = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "integer"},
    },
}


def _doc(**schemas) -> dict:
    return {"openapi": "3.0.0", "components": {"schemas": schemas}}


class TestSchemaReference:
    def test_parse(self):
        assert SchemaReference.parse("#/components/schemas/Pet").name == "Pet"

    def test_parse_rejects_other_prefixes(self):
        with pytest.raises(InvalidReferenceError):
            SchemaReference.parse("#/definitions/Pet")

    def test_invalid_reference_is_a_value_error(self):
        with pytest.raises(ValueError):
            SchemaReference.parse("Pet")

    def test_resolve_item(self):
        named = SchemaReference("Pet").resolve(_doc(Pet=_PET))
        assert named.name == "Pet"
        assert named.schema == _PET

    def test_resolve_chain_keeps_origin_name(self):
        doc = _doc(
            A={"$ref": "#/components/schemas/B"},
            B={"$ref": "#/components/schemas/C"},
            C=_PET,
        )
        via_chain = SchemaReference("A").resolve(doc)
        direct = SchemaReference("C").resolve(doc)
        assert via_chain.schema == direct.schema == _PET
        assert via_chain.name == "A"

    def test_cycle_resolves_to_none(self):
        doc = _doc(
            A={"$ref": "#/components/schemas/B"},
            B={"$ref": "#/components/schemas/A"},
        )
        assert SchemaReference("A").resolve(doc) is None

    def test_self_reference_resolves_to_none(self):
        assert SchemaReference("A").resolve(_doc(A={"$ref": "#/components/schemas/A"})) is None

    def test_missing_entry(self):
        assert SchemaReference("Missing").resolve(_doc(Pet=_PET)) is None

    def test_missing_components(self):
        assert SchemaReference("Pet").resolve({"openapi": "3.0.0"}) is None

    def test_broken_hop(self):
        doc = _doc(A={"$ref": "#/definitions/B"})
        assert SchemaReference("A").resolve(doc) is None


class TestResolveSchema:
    def test_inline_schema_is_anonymous(self):
        resolved = resolve_schema(_doc(), {"type": "string"})
        assert resolved == ResolvedSchema(schema={"type": "string"})
        assert resolved.name is None

    def test_reference_is_named(self):
        resolved = resolve_schema(_doc(Pet=_PET), {"$ref": "#/components/schemas/Pet"})
        assert resolved.name == "Pet"

    def test_bad_prefix_is_none(self):
        assert resolve_schema(_doc(Pet=_PET), {"$ref": "other.yaml#/Pet"}) is None


class TestSchemaConverter:
    def _convert(self, schema: dict, doc: dict | None = None, hint: str | None = None):
        doc = doc or _doc()
        return SchemaConverter(doc).convert_reference(schema, hint)

    def test_primitives(self):
        assert self._convert({"type": "string"}) == STRING
        assert self._convert({"type": "integer"}) == INTEGER
        assert self._convert({"type": "boolean"}) == PrimitiveType(primitive=Primitive.BOOLEAN)
        assert self._convert({"type": "number"}) == PrimitiveType(primitive=Primitive.FLOAT)

    def test_double_format(self):
        assert self._convert({"type": "number", "format": "double"}) == PrimitiveType(primitive=Primitive.DOUBLE)

    def test_named_record(self):
        ty = self._convert({"$ref": "#/components/schemas/Pet"}, _doc(Pet=_PET))
        assert ty == RecordType(
            name="Pet",
            members=[
                Member(name="name", ty=STRING, is_optional=False),
                Member(name="age", ty=INTEGER, is_optional=True),
            ],
        )

    def test_anonymous_record_uses_hint(self):
        ty = self._convert(_PET, hint="getPet response")
        assert ty.name == "getPet response"

    def test_anonymous_record_without_hint(self):
        assert self._convert(_PET).name == UNNAMED

    def test_properties_without_type_are_an_object(self):
        ty = self._convert({"properties": {"id": {"type": "string"}}}, hint="Thing")
        assert isinstance(ty, RecordType)
        assert ty.members[0].is_optional is True

    def test_member_description(self):
        schema = {"type": "object", "properties": {"id": {"type": "string", "description": "Identifier"}}}
        assert self._convert(schema, hint="Thing").members[0].description == "Identifier"

    def test_nested_anonymous_record_name(self):
        schema = {
            "type": "object",
            "properties": {"address": {"type": "object", "properties": {"street": {"type": "string"}}}},
        }
        ty = self._convert(schema, hint="Pet")
        assert ty.members[0].ty.name == "Pet address"

    def test_array_of_refs(self):
        ty = self._convert({"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}, _doc(Pet=_PET))
        assert isinstance(ty, ArrayType)
        assert ty.element.name == "Pet"

    def test_array_through_chain(self):
        doc = _doc(Pets={"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}, Pet=_PET)
        ty = self._convert({"$ref": "#/components/schemas/Pets"}, doc)
        assert ty == ArrayType(element=self._convert({"$ref": "#/components/schemas/Pet"}, doc))

    def test_string_enum_is_union(self):
        doc = _doc(Status={"type": "string", "enum": ["available", "sold"]})
        ty = self._convert({"$ref": "#/components/schemas/Status"}, doc)
        assert ty == UnionType(name="Status", cases=["available", "sold"])

    def test_additional_properties_is_map(self):
        ty = self._convert({"type": "object", "additionalProperties": {"type": "integer"}})
        assert ty == MapType(key=STRING, value=INTEGER)

    def test_object_without_properties_is_empty_record(self):
        assert self._convert({"type": "object"}, hint="Anything") == RecordType(name="Anything")

    def test_composition_is_rejected(self):
        with pytest.raises(UnsupportedSchemaError, match="oneOf"):
            self._convert({"oneOf": [{"type": "string"}, {"type": "integer"}]})

    def test_untyped_schema_is_rejected(self):
        with pytest.raises(UnsupportedSchemaError):
            self._convert({})

    def test_unknown_type_is_rejected(self):
        with pytest.raises(UnsupportedSchemaError, match="file"):
            self._convert({"type": "file"})

    def test_array_without_items_is_rejected(self):
        with pytest.raises(UnsupportedSchemaError):
            self._convert({"type": "array"})

    def test_unresolvable_property_is_an_error(self):
        schema = {"type": "object", "properties": {"owner": {"$ref": "#/components/schemas/Missing"}}}
        with pytest.raises(UnresolvableReferenceError, match="Missing"):
            self._convert(schema, hint="Pet")

    def test_self_referential_schema_terminates(self):
        doc = _doc(
            Node={
                "type": "object",
                "properties": {
                    "value": {"type": "string"},
                    "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
                },
            }
        )
        ty = self._convert({"$ref": "#/components/schemas/Node"}, doc)
        assert ty.name == "Node"
        children = ty.members[1].ty
        assert children == ArrayType(element=RecordType(name="Node"))

    def test_mutual_recursion_terminates(self):
        doc = _doc(
            Owner={"type": "object", "properties": {"pets": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}}},
            Pet={"type": "object", "properties": {"owner": {"$ref": "#/components/schemas/Owner"}}},
        )
        ty = self._convert({"$ref": "#/components/schemas/Owner"}, doc)
        pet = ty.members[0].ty.element
        assert pet.name == "Pet"
        assert pet.members[0].ty == RecordType(name="Owner")

    def test_recursion_through_array_alias(self):
        doc = _doc(
            NodeList={"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
            Node={"type": "object", "properties": {"children": {"$ref": "#/components/schemas/NodeList"}}},
        )
        node = self._convert({"$ref": "#/components/schemas/Node"}, doc)
        assert node.members[0].ty == ArrayType(element=RecordType(name="Node"))

    def test_array_alias_as_root(self):
        doc = _doc(
            NodeList={"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
            Node={"type": "object", "properties": {"children": {"$ref": "#/components/schemas/NodeList"}}},
        )
        ty = self._convert({"$ref": "#/components/schemas/NodeList"}, doc)
        assert isinstance(ty, ArrayType)
        assert ty.element.name == "Node"
        assert ty.element.members[0].ty == ArrayType(element=RecordType(name="Node"))

    def test_recursion_through_map_alias(self):
        doc = _doc(
            Tree={"type": "object", "additionalProperties": {"$ref": "#/components/schemas/Leaf"}},
            Leaf={"type": "object", "properties": {"branches": {"$ref": "#/components/schemas/Tree"}}},
        )
        tree = self._convert({"$ref": "#/components/schemas/Tree"}, doc)
        assert isinstance(tree, MapType)
        assert tree.value.members[0].ty == MapType(key=STRING, value=RecordType(name="Leaf"))

    def test_array_containing_itself_is_rejected(self):
        doc = _doc(Nested={"type": "array", "items": {"$ref": "#/components/schemas/Nested"}})
        with pytest.raises(UnsupportedSchemaError, match="Nested"):
            self._convert({"$ref": "#/components/schemas/Nested"}, doc)

    def test_document_is_not_mutated(self):
        doc = _doc(Pet=_PET)
        before = repr(doc)
        self._convert({"$ref": "#/components/schemas/Pet"}, doc)
        assert repr(doc) == before

    def test_convert_resolved_directly(self):
        converter = SchemaConverter(_doc())
        ty = converter.convert(ResolvedSchema(schema=_PET, name="Pet"), "ignored hint")
        assert ty.name == "Pet"
