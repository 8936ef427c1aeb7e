"""Document → routes → declarations → SDK text."""

from dataclasses import dataclass
from typing import Any

from sdkgen.config import SdkgenConfig
from sdkgen.core.registry import TypeDeclarations, build_type_declarations
from sdkgen.core.routes import Route, SdkVersion, versions_from_routes
from sdkgen.emitter.languages import get_emitter
from sdkgen.errors import MalformedDocumentError
from sdkgen.parser.apidoc import routes_from_apidoc
from sdkgen.parser.detect import APIDOC, OPENAPI, detect_format
from sdkgen.parser.openapi import routes_from_openapi


@dataclass
class ApiModel:
    """Everything an emitter needs, built once per run."""

    routes: list[Route]
    types: TypeDeclarations
    versions: list[SdkVersion]


def routes_from_document(document: Any, fmt: str = "auto", api_version: str | None = None) -> list[Route]:
    """Run the adapter matching the document format."""
    if fmt == "auto":
        fmt = detect_format(document)

    if fmt == OPENAPI:
        if not isinstance(document, dict):
            raise MalformedDocumentError("An OpenAPI document must be a mapping at the top level")
        return routes_from_openapi(document, version=api_version or "")
    elif fmt == APIDOC:
        if not isinstance(document, list):
            raise MalformedDocumentError("apiDoc data must be a list of routes")
        return routes_from_apidoc(document)
    else:
        raise ValueError(f"Unknown format '{fmt}'")


def build_model(document: Any, config: SdkgenConfig) -> ApiModel:
    routes = routes_from_document(document, config.format, config.api_version)
    return ApiModel(
        routes=routes,
        types=build_type_declarations(routes, allow_redefinition=config.allow_redefinition),
        versions=versions_from_routes(routes),
    )


def generate_sdk(document: Any, config: SdkgenConfig) -> str:
    """Full pipeline for an already parsed document."""
    emitter = get_emitter(config.language)
    model = build_model(document, config)
    return emitter.generate(model.types, model.versions)
