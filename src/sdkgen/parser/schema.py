"""Resolve OpenAPI schema references and convert schemas into Types.

Handles:
- $ref chains through #/components/schemas/ (cycles resolve to nothing)
- string/integer/number/boolean primitives
- string enums as nominal unions
- objects as records, additionalProperties-only objects as maps
- arrays
- self-referential schemas (nested back-references become named stubs)

allOf/oneOf/anyOf/not, unknown kinds and arrays or maps that contain
themselves with no record in between are rejected.
"""

from dataclasses import dataclass
from typing import Any

from sdkgen.core.types import (
    ArrayType,
    MapType,
    Member,
    Primitive,
    PrimitiveType,
    RecordType,
    Type,
    UnionType,
)
from sdkgen.errors import InvalidReferenceError, UnresolvableReferenceError, UnsupportedSchemaError

SCHEMA_PREFIX = "#/components/schemas/"

# Name given to an anonymous record when the caller has no better hint
UNNAMED = "No Name"

_COMPOSITIONS = ("allOf", "oneOf", "anyOf", "not")


@dataclass(frozen=True)
class NamedSchema:
    name: str
    schema: dict[str, Any]


@dataclass(frozen=True)
class ResolvedSchema:
    """A concrete schema, named when it was reached through a component reference."""

    schema: dict[str, Any]
    name: str | None = None


def _is_nominal(schema: dict[str, Any]) -> bool:
    """Whether the schema converts to a named record or union."""
    kind = schema.get("type")
    if kind is None and "properties" in schema:
        kind = "object"
    if kind == "object":
        return bool(schema.get("properties")) or not isinstance(schema.get("additionalProperties"), dict)
    return kind == "string" and "enum" in schema


class SchemaReference:
    """A pointer into the document's component schema table."""

    def __init__(self, name: str):
        self.name = name

    @classmethod
    def parse(cls, value: str) -> "SchemaReference":
        if not isinstance(value, str) or not value.startswith(SCHEMA_PREFIX):
            raise InvalidReferenceError(f"Not a schema reference: '{value}'.")
        return cls(value[len(SCHEMA_PREFIX):])

    def resolve(self, document: dict[str, Any]) -> NamedSchema | None:
        """Follow the reference chain to a concrete schema.

        The result keeps this reference's name. Returns None when the
        component table or an entry is missing, a hop is not a schema
        reference, or the chain loops.
        """
        components = document.get("components") or {}
        schemas = components.get("schemas") or {}

        visited: set[str] = set()
        current = self.name
        while current not in visited:
            visited.add(current)
            entry = schemas.get(current)
            if not isinstance(entry, dict):
                return None
            if "$ref" not in entry:
                return NamedSchema(name=self.name, schema=entry)
            try:
                current = SchemaReference.parse(entry["$ref"]).name
            except InvalidReferenceError:
                return None
        return None

    def __repr__(self) -> str:
        return f"SchemaReference({self.name!r})"


def resolve_schema(document: dict[str, Any], schema: dict[str, Any]) -> ResolvedSchema | None:
    """Resolve an inline schema or a {"$ref": ...} position."""
    if "$ref" not in schema:
        return ResolvedSchema(schema=schema)
    try:
        reference = SchemaReference.parse(schema["$ref"])
    except InvalidReferenceError:
        return None
    named = reference.resolve(document)
    if named is None:
        return None
    return ResolvedSchema(schema=named.schema, name=named.name)


class SchemaConverter:
    """Converts resolved schemas of one document into canonical Types."""

    def __init__(self, document: dict[str, Any]):
        self.document = document
        # (component name, converts to a named type) for each component being converted
        self._in_progress: list[tuple[str, bool]] = []

    def convert_reference(self, schema: dict[str, Any], name_hint: str | None = None) -> Type:
        """Resolve then convert; a reference that cannot be resolved is an error."""
        resolved = resolve_schema(self.document, schema)
        if resolved is None:
            raise UnresolvableReferenceError(str(schema.get("$ref", schema)))
        return self.convert(resolved, name_hint)

    def convert(self, resolved: ResolvedSchema, name_hint: str | None = None) -> Type:
        """Convert a resolved schema.

        A component name always wins over the structural name. While a record
        component is being converted, a nested reference back to it yields a
        memberless record carrying just the name. A reference back to an
        array or map component is converted again; the cycle stops at the
        record it runs through.
        """
        name = resolved.name
        if name is not None and self._is_back_reference(name):
            return RecordType(name=name)

        if name is not None:
            self._in_progress.append((name, _is_nominal(resolved.schema)))
        try:
            ty = self._convert_kind(resolved.schema, name or name_hint or UNNAMED)
        finally:
            if name is not None:
                self._in_progress.pop()

        if name is not None:
            ty = ty.with_name(name)
        return ty

    def _is_back_reference(self, name: str) -> bool:
        """Whether a reference to `name` must become a back-reference stub."""
        positions = [i for i, (entry, _) in enumerate(self._in_progress) if entry == name]
        if not positions:
            return False
        last = positions[-1]
        if self._in_progress[last][1]:
            return True
        if any(nominal for _, nominal in self._in_progress[last + 1:]):
            return False
        # An array or map that contains itself with no record in between
        raise UnsupportedSchemaError("recursive alias", name)

    def _convert_kind(self, schema: dict[str, Any], name: str) -> Type:
        for composition in _COMPOSITIONS:
            if composition in schema:
                raise UnsupportedSchemaError(composition, name)

        kind = schema.get("type")
        if kind is None and "properties" in schema:
            kind = "object"

        if kind == "string":
            if "enum" in schema:
                return UnionType(name=name, cases=[str(value) for value in schema["enum"]])
            return PrimitiveType(primitive=Primitive.STRING)
        if kind == "integer":
            return PrimitiveType(primitive=Primitive.INTEGER)
        if kind == "number":
            if schema.get("format") == "double":
                return PrimitiveType(primitive=Primitive.DOUBLE)
            return PrimitiveType(primitive=Primitive.FLOAT)
        if kind == "boolean":
            return PrimitiveType(primitive=Primitive.BOOLEAN)
        if kind == "object":
            return self._convert_object(schema, name)
        if kind == "array":
            items = schema.get("items")
            if not isinstance(items, dict):
                raise UnsupportedSchemaError("array without items", name)
            return ArrayType(element=self.convert_reference(items, f"{name} item"))

        raise UnsupportedSchemaError(str(kind) if kind is not None else "untyped", name)

    def _convert_object(self, schema: dict[str, Any], name: str) -> Type:
        properties = schema.get("properties") or {}
        additional = schema.get("additionalProperties")
        if not properties and isinstance(additional, dict):
            return MapType(
                key=PrimitiveType(primitive=Primitive.STRING),
                value=self.convert_reference(additional, f"{name} value"),
            )

        required = set(schema.get("required") or [])
        members = []
        for prop_name, prop_schema in properties.items():
            members.append(
                Member(
                    name=prop_name,
                    description=prop_schema.get("description"),
                    ty=self.convert_reference(prop_schema, f"{name} {prop_name}"),
                    is_optional=prop_name not in required,
                )
            )
        return RecordType(name=name, members=members)
