"""SDK emitter interface and the jinja2-backed base shared by all languages.

An emitter turns the normalized model (type declarations plus the
version/resource/route tree) into source text. It only reads the model.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

import jinja2

from sdkgen.core.registry import TypeDeclarations
from sdkgen.core.routes import ParameterSegment, Route, SdkVersion
from sdkgen.core.types import ArrayType, MapType, Primitive, PrimitiveType, Type
from sdkgen.emitter.casing import CasingRules

TEMPLATE_DIR = Path(__file__).parent / "templates"


class SdkEmitter(ABC):
    """Generates SDK source for one target language."""

    language: str = ""
    file_extension: str = ""

    @abstractmethod
    def generate(self, types: TypeDeclarations, versions: list[SdkVersion]) -> str:
        """Render the complete SDK source."""


class TemplateEmitter(SdkEmitter):
    """Renders a single jinja2 template with language-specific filters.

    Subclasses describe the language: template file, casing rules, primitive
    names and the formats for arrays, maps, parameters and URL placeholders.
    """

    template_name: str
    casing: CasingRules
    primitives: dict[Primitive, str]
    array_format: str
    map_format: str
    parameter_format: str
    url_parameter_format: str

    def __init__(self) -> None:
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(self.filters())

    def filters(self) -> dict[str, Callable[..., Any]]:
        return {
            "type_case": self.casing.type_name,
            "member_case": self.casing.record_member,
            "function_case": self.casing.function_name,
            "parameter_case": self.casing.parameter,
            "type_ref": self.type_ref,
            "parameter_list": self.parameter_list,
            "url_template": self.url_template,
        }

    def generate(self, types: TypeDeclarations, versions: list[SdkVersion]) -> str:
        template = self.env.get_template(self.template_name)
        return template.render(declarations=list(types), versions=versions)

    def type_ref(self, ty: Type | None) -> str:
        """Spell a type where it is used; a missing type reads as a string."""
        if ty is None:
            return self.primitives[Primitive.STRING]
        if isinstance(ty, PrimitiveType):
            return self.primitives[ty.primitive]
        if isinstance(ty, ArrayType):
            return self.array_format.format(element=self.type_ref(ty.element))
        if isinstance(ty, MapType):
            return self.map_format.format(key=self.type_ref(ty.key), value=self.type_ref(ty.value))
        return self.casing.type_name(ty.type_name())

    def parameter_list(self, route: Route) -> str:
        return ", ".join(
            self.parameter_format.format(name=self.casing.parameter(name), type=self.type_ref(ty))
            for name, ty in route.all_parameters()
        )

    def url_template(self, route: Route) -> str:
        parts = []
        for segment in route.url_segments():
            if isinstance(segment, ParameterSegment):
                parts.append(self.url_parameter_format.format(name=self.casing.parameter(segment.value)))
            else:
                parts.append(segment.value)
        return "/".join(parts)
