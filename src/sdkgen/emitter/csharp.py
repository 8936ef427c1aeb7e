"""C# SDK emitter (HttpClient + Newtonsoft.Json)."""

import re
from typing import Any, Callable

from sdkgen.core.types import Member, Primitive, PrimitiveType
from sdkgen.emitter.base import TemplateEmitter
from sdkgen.emitter.casing import CSHARP_CASING

# Primitives that are value types in C# and need '?' to be optional
_VALUE_TYPES = {Primitive.BOOLEAN, Primitive.INTEGER, Primitive.FLOAT, Primitive.DOUBLE}


class CSharpEmitter(TemplateEmitter):
    language = "csharp"
    file_extension = ".cs"

    template_name = "csharp.cs.j2"
    casing = CSHARP_CASING
    primitives = {
        Primitive.STRING: "string",
        Primitive.BOOLEAN: "bool",
        Primitive.INTEGER: "int",
        Primitive.FLOAT: "float",
        Primitive.DOUBLE: "double",
    }
    array_format = "List<{element}>"
    map_format = "Dictionary<{key}, {value}>"
    parameter_format = "{type} {name}"
    url_parameter_format = "{{{name}}}"

    def filters(self) -> dict[str, Callable[..., Any]]:
        filters = super().filters()
        filters["member_type"] = self.member_type
        filters["namespace"] = self.namespace
        return filters

    def member_type(self, member: Member) -> str:
        type_ref = self.type_ref(member.ty)
        if member.is_optional and isinstance(member.ty, PrimitiveType) and member.ty.primitive in _VALUE_TYPES:
            return f"{type_ref}?"
        return type_ref

    def namespace(self, version: str) -> str:
        """Sdk for an unversioned API, Sdk.V1_0_0 for version 1.0.0."""
        if not version:
            return "Sdk"
        return "Sdk.V" + re.sub(r"\W", "_", version)
