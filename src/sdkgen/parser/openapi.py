"""OpenAPI 3.x route extractor.

Walks paths and their get/post/put/patch/delete operations and builds one
Route per operation. Takes an already parsed document (see detect.py).
"""

from typing import Any

import click

from sdkgen.core.routes import HttpMethod, Route, UrlParameter
from sdkgen.core.types import Primitive, Type
from sdkgen.errors import MissingOperationIdError
from sdkgen.parser.schema import SchemaConverter, resolve_schema

METHODS = ("get", "post", "put", "patch", "delete")

JSON_MEDIA_TYPE = "application/json"


def routes_from_openapi(document: dict[str, Any], version: str = "") -> list[Route]:
    """Extract all routes from an OpenAPI document, in document order."""
    routes: list[Route] = []
    for path, path_item in (document.get("paths") or {}).items():
        if "$ref" in path_item:
            click.echo(f"Unhandled reference at path: '{path}'", err=True)
            continue
        routes.extend(path_to_routes(document, path, path_item, version))
    return routes


def path_to_routes(
    document: dict[str, Any],
    path: str,
    path_item: dict[str, Any],
    version: str = "",
) -> list[Route]:
    """Build one route per operation present on a path item."""
    shared_parameters = path_item.get("parameters") or []
    return [
        operation_to_route(document, path, method, path_item[method], shared_parameters, version)
        for method in METHODS
        if path_item.get(method) is not None
    ]


def normalize_url(path: str) -> str:
    """Rewrite {name} path parameters to the :name marker convention."""
    return path.replace("{", ":").replace("}", "")


def operation_to_route(
    document: dict[str, Any],
    path: str,
    method: str,
    operation: dict[str, Any],
    shared_parameters: list[dict[str, Any]] | None = None,
    version: str = "",
) -> Route:
    operation_id = operation.get("operationId")
    if not operation_id or not str(operation_id).strip():
        raise MissingOperationIdError(path, method)

    converter = SchemaConverter(document)
    return Route(
        name=operation_id,
        description=operation.get("summary") or operation.get("description"),
        method=HttpMethod.parse(method),
        url=normalize_url(path),
        group=path,
        version=version,
        url_parameters=_url_parameters(shared_parameters or [], operation.get("parameters") or []),
        payload_type=_payload_type(converter, operation, operation_id),
        return_type=_return_type(converter, operation, operation_id),
    )


def _url_parameters(
    shared_parameters: list[dict[str, Any]],
    operation_parameters: list[dict[str, Any]],
) -> list[UrlParameter]:
    """Path-located parameters; operation parameters override path-level ones."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for parameter in [*shared_parameters, *operation_parameters]:
        if "$ref" in parameter:
            continue
        merged[(parameter.get("name"), parameter.get("in"))] = parameter

    # Source parameter types are not modeled; every path parameter is a string.
    return [
        UrlParameter(name=parameter["name"], ty=Primitive.STRING)
        for parameter in merged.values()
        if parameter.get("in") == "path"
    ]


def _return_type(converter: SchemaConverter, operation: dict[str, Any], operation_id: str) -> Type | None:
    """Type of the default response, else of the 200 response."""
    responses = operation.get("responses") or {}
    response = responses.get("default")
    if response is None:
        response = responses.get("200", responses.get(200))
    if response is None or "$ref" in response:
        return None
    return _body_type(converter, response, f"{operation_id} response")


def _payload_type(converter: SchemaConverter, operation: dict[str, Any], operation_id: str) -> Type | None:
    request_body = operation.get("requestBody")
    if request_body is None or "$ref" in request_body:
        return None
    return _body_type(converter, request_body, f"{operation_id} payload")


def _body_type(converter: SchemaConverter, body: dict[str, Any], name_hint: str) -> Type | None:
    """Convert the JSON schema of a request or response body.

    A missing JSON content entry or an unresolvable top-level reference
    leaves the type absent. Failures deeper in the schema are raised.
    """
    media_type = (body.get("content") or {}).get(JSON_MEDIA_TYPE)
    if media_type is None or media_type.get("schema") is None:
        return None

    schema = media_type["schema"]
    resolved = resolve_schema(converter.document, schema)
    if resolved is None:
        click.echo(f"No schema for {name_hint}: cannot resolve '{schema.get('$ref')}'", err=True)
        return None
    return converter.convert(resolved, name_hint)
