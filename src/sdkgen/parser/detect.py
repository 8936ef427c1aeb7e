"""Load API documents and auto-detect their format."""

import json
from pathlib import Path
from typing import Any

import yaml

from sdkgen.errors import MalformedDocumentError, UnknownFormatError

OPENAPI = "openapi"
APIDOC = "apidoc"


def load_document(file_path: Path) -> Any:
    """Parse a YAML or JSON file into plain Python data."""
    text = file_path.read_text(encoding="utf-8")

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as yaml_error:
        # Some JSON (tabs in indentation, for one) is not valid YAML
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            raise MalformedDocumentError(f"Cannot parse {file_path}: {yaml_error}") from yaml_error


def detect_format(document: Any) -> str:
    """Detect whether a parsed document is OpenAPI or apiDoc data.

    Returns: 'openapi' or 'apidoc'.
    """
    if isinstance(document, dict):
        if "openapi" in document:
            return OPENAPI
        if "swagger" in document:
            raise UnknownFormatError("Swagger 2.0 documents are not supported, convert to OpenAPI 3 first")

    if isinstance(document, list) and all(
        isinstance(entry, dict) and "url" in entry and "type" in entry for entry in document
    ):
        return APIDOC

    raise UnknownFormatError("Document is neither an OpenAPI document nor apiDoc data")
