"""apiDoc route extractor.

Converts the route list of an apiDoc `api_data.json` into Routes. Each entry
looks like:

    {"type": "get", "url": "/user/:id", "name": "GetUser", "group": "User",
     "version": "1.0.0", "title": "Read user data",
     "parameter": {"fields": {"Parameter": [{"field": "id", "type": "Number",
                                             "optional": false, ...}]}},
     "success": {"fields": {"Success 200": [...]}}}

Dotted field names ("address.street") nest inside the parent field. URL
parameters come from ':name' segments of the URL.
"""

import re
from typing import Any

from sdkgen.core.routes import HttpMethod, Route, UrlParameter
from sdkgen.core.types import ArrayType, MapType, Member, Primitive, PrimitiveType, RecordType, Type, UnionType
from sdkgen.errors import UnknownPrimitiveError

_FIELD_TYPES: dict[str, Primitive] = {
    "string": Primitive.STRING,
    "number": Primitive.FLOAT,
    "integer": Primitive.INTEGER,
    "int": Primitive.INTEGER,
    "float": Primitive.FLOAT,
    "double": Primitive.DOUBLE,
    "boolean": Primitive.BOOLEAN,
    "bool": Primitive.BOOLEAN,
}

_OBJECT = "object"

# Methods whose non-URL parameters are sent as a JSON body
_BODY_METHODS = {HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH}

# Size and range decorations such as String{1..5} or Number{0-100}
_TYPE_DECORATION = re.compile(r"\{[^}]*\}")


def _strip_html(text: str) -> str:
    """Strip HTML tags and collapse whitespace."""
    text = re.sub(r"<[^>]+>", "", text)
    return re.sub(r"\s+", " ", text).strip()


class _FieldNode:
    def __init__(self) -> None:
        self.field: dict[str, Any] | None = None
        self.children: dict[str, "_FieldNode"] = {}


def routes_from_apidoc(entries: list[dict[str, Any]]) -> list[Route]:
    """Extract all routes from apiDoc data, in input order.

    apiDoc lists every version of a route under the same name. Types of a
    route that appears in more than one version carry the version in their
    name, so each version keeps its own payload and response declarations.
    """
    versions_by_name: dict[str, set[str]] = {}
    for entry in entries:
        versions_by_name.setdefault(entry.get("name", ""), set()).add(entry.get("version", ""))

    return [
        route_from_entry(entry, versioned_types=len(versions_by_name[entry.get("name", "")]) > 1)
        for entry in entries
    ]


def route_from_entry(entry: dict[str, Any], versioned_types: bool = False) -> Route:
    name = entry.get("name", "")
    version = entry.get("version", "")
    method = HttpMethod.parse(entry.get("type", ""))
    url = entry.get("url", "")

    type_prefix = f"{name} {version}" if versioned_types and version else name

    parameter_fields = _section_fields(entry.get("parameter"))
    success_fields = _section_fields(entry.get("success"))

    url_names = [segment[1:] for segment in url.split("/") if segment.startswith(":")]
    fields_by_name = {field.get("field"): field for field in parameter_fields}
    url_parameters = [
        UrlParameter(name=url_name, ty=_url_parameter_type(fields_by_name.get(url_name)))
        for url_name in url_names
    ]

    payload_type = None
    if method in _BODY_METHODS:
        body_fields = [field for field in parameter_fields if field.get("field") not in url_names]
        payload_type = record_from_fields(f"{type_prefix} payload", body_fields)

    return Route(
        name=name,
        description=_strip_html(entry.get("title") or ""),
        method=method,
        url=url,
        group=entry.get("group", ""),
        version=version,
        url_parameters=url_parameters,
        payload_type=payload_type,
        return_type=record_from_fields(f"{type_prefix} response", success_fields),
    )


def _section_fields(section: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Flatten the per-group field lists of a parameter/success section."""
    if not section:
        return []
    fields: list[dict[str, Any]] = []
    for group_fields in (section.get("fields") or {}).values():
        fields.extend(group_fields)
    return fields


def parse_field_type(raw: str) -> tuple[str, bool]:
    """Split an apiDoc type like 'String[]' into ('string', True)."""
    cleaned = _TYPE_DECORATION.sub("", raw).strip()
    is_array = cleaned.endswith("[]")
    if is_array:
        cleaned = cleaned[:-2].strip()
    return cleaned.lower(), is_array


def _primitive(base: str, raw: str, field_name: str) -> Primitive:
    try:
        return _FIELD_TYPES[base]
    except KeyError:
        raise UnknownPrimitiveError(raw, field_name) from None


def _url_parameter_type(field: dict[str, Any] | None) -> Primitive:
    if field is None:
        return Primitive.STRING
    raw = field.get("type") or "String"
    base, is_array = parse_field_type(raw)
    if base == _OBJECT or is_array:
        return Primitive.STRING
    return _primitive(base, raw, field.get("field", ""))


def record_from_fields(name: str, fields: list[dict[str, Any]]) -> RecordType | None:
    """Build a record from a flat field list, nesting dotted names."""
    if not fields:
        return None

    root: dict[str, _FieldNode] = {}
    for field in fields:
        parts = field["field"].split(".")
        level = root
        for part in parts[:-1]:
            level = level.setdefault(part, _FieldNode()).children
        level.setdefault(parts[-1], _FieldNode()).field = field

    return RecordType(name=name, members=_members(name, root))


def _members(record_name: str, nodes: dict[str, _FieldNode]) -> list[Member]:
    members = []
    for key, node in nodes.items():
        field = node.field or {}
        description = _strip_html(field.get("description") or "")
        members.append(
            Member(
                name=key,
                description=description or None,
                ty=_field_type(f"{record_name} {key}", node),
                is_optional=bool(field.get("optional", False)),
            )
        )
    return members


def _field_type(name: str, node: _FieldNode) -> Type:
    if node.field is None:
        # Parent never declared on its own, only implied by dotted children
        return RecordType(name=name, members=_members(name, node.children))

    raw = node.field.get("type") or "String"
    base, is_array = parse_field_type(raw)

    element: Type
    if base == _OBJECT:
        if node.children:
            element = RecordType(name=name, members=_members(name, node.children))
        else:
            element = MapType(
                key=PrimitiveType(primitive=Primitive.STRING),
                value=PrimitiveType(primitive=Primitive.STRING),
            )
    else:
        primitive = _primitive(base, raw, node.field.get("field", ""))
        allowed_values = node.field.get("allowedValues")
        if allowed_values and primitive == Primitive.STRING:
            element = UnionType(name=name, cases=[str(value).strip("\"'") for value in allowed_values])
        else:
            element = PrimitiveType(primitive=primitive)

    if is_array:
        return ArrayType(element=element)
    return element
