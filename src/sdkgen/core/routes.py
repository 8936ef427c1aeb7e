"""Route model and the version/resource grouping handed to emitters."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from sdkgen.core.types import Primitive, PrimitiveType, Type
from sdkgen.errors import UnsupportedHttpMethodError


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: str) -> "HttpMethod":
        """Parse a method name case-insensitively."""
        try:
            return cls(value.upper())
        except ValueError:
            raise UnsupportedHttpMethodError(f"Unsupported HTTP method '{value}'") from None


class UrlParameter(BaseModel):
    """A path parameter; only primitives can appear in a URL."""

    name: str
    ty: Primitive = Primitive.STRING


class LiteralSegment(BaseModel):
    value: str


class ParameterSegment(BaseModel):
    value: str


UrlSegment = LiteralSegment | ParameterSegment


class Route(BaseModel):
    """A single SDK function: one HTTP operation on one URL template."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    method: HttpMethod
    url: str  # /pets/:id
    group: str
    version: str = ""
    url_parameters: list[UrlParameter] = []
    payload_type: Type | None = None
    return_type: Type | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Route name must not be empty or whitespace")
        return value

    @field_validator("description")
    @classmethod
    def _blank_description_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    def url_segments(self) -> list[UrlSegment]:
        """Split the URL template on '/', marking ':name' segments as parameters.

        The empty segment before a leading slash is kept as an empty literal,
        so joining the values back with '/' reproduces the template.
        """
        segments: list[UrlSegment] = []
        for segment in self.url.split("/"):
            if segment.startswith(":"):
                segments.append(ParameterSegment(value=segment[1:]))
            else:
                segments.append(LiteralSegment(value=segment))
        return segments

    def all_parameters(self) -> list[tuple[str, Type]]:
        """URL parameters in declaration order, then the payload (always last)."""
        parameters: list[tuple[str, Type]] = [
            (parameter.name, PrimitiveType(primitive=parameter.ty))
            for parameter in self.url_parameters
        ]
        if self.payload_type is not None:
            parameters.append(("payload", self.payload_type))
        return parameters


class SdkResource(BaseModel):
    resource: str
    routes: list[Route]


class SdkVersion(BaseModel):
    version: str
    resources: list[SdkResource]


def versions_from_routes(routes: list[Route]) -> list[SdkVersion]:
    """Group routes by version, then by group, keeping first-seen order."""
    versions: dict[str, dict[str, list[Route]]] = {}
    for route in routes:
        versions.setdefault(route.version, {}).setdefault(route.group, []).append(route)

    return [
        SdkVersion(
            version=version,
            resources=[
                SdkResource(resource=group, routes=group_routes)
                for group, group_routes in groups.items()
            ],
        )
        for version, groups in versions.items()
    ]
