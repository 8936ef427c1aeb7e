"""Canonical type algebra shared by the parsers and the emitters.

Every source format is normalized into these models. Only UnionType and
RecordType carry a name and get declared by a target language; primitives,
arrays and maps are always referenced structurally.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Primitive(str, Enum):
    """Scalar types representable in every target language."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DOUBLE = "double"


class _BaseType(BaseModel):
    model_config = ConfigDict(frozen=True)

    def type_name(self) -> str | None:
        """Name under which the type is declared, None for structural types."""
        return None

    def with_name(self, name: str) -> "Type":
        """Return a copy named `name`; structural types are returned unchanged."""
        return self

    def children(self) -> list["Type"]:
        """Types directly below this one (elements, keys and values, member types)."""
        return []

    def referenced_types(self) -> list["Type"]:
        """All types nested below this one, depth first."""
        return []


class PrimitiveType(_BaseType):
    kind: Literal["primitive"] = "primitive"
    primitive: Primitive


class ArrayType(_BaseType):
    kind: Literal["array"] = "array"
    element: "Type"

    def children(self) -> list["Type"]:
        return [self.element]

    def referenced_types(self) -> list["Type"]:
        return [self.element, *self.element.referenced_types()]


class MapType(_BaseType):
    kind: Literal["map"] = "map"
    key: "Type"
    value: "Type"

    def children(self) -> list["Type"]:
        return [self.key, self.value]

    def referenced_types(self) -> list["Type"]:
        return [
            self.key,
            self.value,
            *self.key.referenced_types(),
            *self.value.referenced_types(),
        ]


class UnionType(_BaseType):
    """Nominal union: case labels only, no payload per case."""

    kind: Literal["union"] = "union"
    name: str
    cases: list[str]

    def type_name(self) -> str | None:
        return self.name

    def with_name(self, name: str) -> "Type":
        return self.model_copy(update={"name": name})


class RecordType(_BaseType):
    kind: Literal["record"] = "record"
    name: str
    members: list["Member"] = []

    def type_name(self) -> str | None:
        return self.name

    def with_name(self, name: str) -> "Type":
        return self.model_copy(update={"name": name})

    def children(self) -> list["Type"]:
        return [member.ty for member in self.members]

    def referenced_types(self) -> list["Type"]:
        referenced: list[Type] = []
        for member in self.members:
            referenced.append(member.ty)
            referenced.extend(member.ty.referenced_types())
        return referenced


class Member(BaseModel):
    """A single field of a record."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    ty: "Type"
    is_optional: bool = False


Type = Annotated[
    Union[PrimitiveType, ArrayType, MapType, UnionType, RecordType],
    Field(discriminator="kind"),
]

ArrayType.model_rebuild()
MapType.model_rebuild()
RecordType.model_rebuild()
Member.model_rebuild()


def primitive(kind: Primitive) -> PrimitiveType:
    return PrimitiveType(primitive=kind)
