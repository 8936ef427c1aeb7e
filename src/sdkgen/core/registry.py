"""Flat table of every named type an SDK has to declare.

Routes only hold their root payload/return types. The registry walks those
trees and collects each named type once, in first-registered order, which is
the order emitters write declarations in.
"""

from collections.abc import Iterator

from sdkgen.core.routes import Route
from sdkgen.core.types import ArrayType, MapType, RecordType, Type, UnionType
from sdkgen.errors import ConflictingTypeError


def _shape(ty: Type, top: bool = True):
    """Comparable shape of a type where nested named types count by name only.

    Two conversions of the same schema can unroll a recursive reference to
    different depths; comparing nested named types by name keeps them equal.
    """
    if isinstance(ty, RecordType):
        if not top:
            return ("named", ty.name)
        return (
            "record",
            ty.name,
            tuple(
                (m.name, m.description, m.is_optional, _shape(m.ty, top=False))
                for m in ty.members
            ),
        )
    if isinstance(ty, UnionType):
        if not top:
            return ("named", ty.name)
        return ("union", ty.name, tuple(ty.cases))
    if isinstance(ty, ArrayType):
        return ("array", _shape(ty.element, top=False))
    if isinstance(ty, MapType):
        return ("map", _shape(ty.key, top=False), _shape(ty.value, top=False))
    return ("primitive", ty.primitive)


class TypeDeclarations:
    """Insertion-ordered mapping of type name to type."""

    def __init__(self, allow_redefinition: bool = False):
        self.allow_redefinition = allow_redefinition
        self._declarations: dict[str, Type] = {}

    def register(self, ty: Type) -> None:
        """Declare `ty` if it is named, then walk its direct children.

        A memberless record whose name is already declared is a back-reference
        produced for a recursive schema and never replaces the declaration.
        Neither it nor an equal re-registration is walked again.
        """
        name = ty.type_name()
        if name is not None:
            existing = self._declarations.get(name)
            if existing is not None:
                if isinstance(ty, RecordType) and not ty.members:
                    return
                if _shape(existing) == _shape(ty):
                    return
                if not self.allow_redefinition:
                    raise ConflictingTypeError(name)
            self._declarations[name] = ty

        for child in ty.children():
            self.register(child)

    def names(self) -> list[str]:
        return list(self._declarations)

    def __getitem__(self, name: str) -> Type:
        return self._declarations[name]

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    def __iter__(self) -> Iterator[tuple[str, Type]]:
        return iter(self._declarations.items())


def build_type_declarations(routes: list[Route], allow_redefinition: bool = False) -> TypeDeclarations:
    """Register every route's payload type, then its return type, in route order."""
    declarations = TypeDeclarations(allow_redefinition=allow_redefinition)
    for route in routes:
        if route.payload_type is not None:
            declarations.register(route.payload_type)
        if route.return_type is not None:
            declarations.register(route.return_type)
    return declarations
