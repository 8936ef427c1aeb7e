"""Exceptions raised while turning an API document into an SDK.

Everything derives from SdkgenError so the CLI can report any failure
with a single handler. A raised error always aborts the run.
"""


class SdkgenError(Exception):
    """Base class for all sdkgen failures."""


class MalformedDocumentError(SdkgenError):
    """The input file could not be parsed as YAML or JSON."""


class UnknownFormatError(SdkgenError):
    """The parsed document is neither an OpenAPI document nor apiDoc data."""


class InvalidReferenceError(SdkgenError, ValueError):
    """A $ref string does not point into #/components/schemas/."""


class UnresolvableReferenceError(SdkgenError):
    """A schema reference could not be traced to a concrete schema."""

    def __init__(self, reference: str):
        super().__init__(f"Unresolvable schema reference: '{reference}'")
        self.reference = reference


class UnsupportedSchemaError(SdkgenError):
    """The schema uses a kind the converter does not model (allOf, oneOf, ...)."""

    def __init__(self, kind: str, context: str = ""):
        where = f" at {context}" if context else ""
        super().__init__(f"Unsupported schema kind '{kind}'{where}")
        self.kind = kind


class UnknownPrimitiveError(SdkgenError):
    """An apiDoc field type does not name a known primitive."""

    def __init__(self, value: str, field: str = ""):
        where = f" for field '{field}'" if field else ""
        super().__init__(f"Unknown field type '{value}'{where}")
        self.value = value


class UnsupportedHttpMethodError(SdkgenError):
    """The route uses a method outside GET/POST/PUT/PATCH/DELETE."""


class MissingOperationIdError(SdkgenError):
    """An OpenAPI operation has no operationId."""

    def __init__(self, path: str, method: str):
        super().__init__(f"No operation ID for {method.upper()} {path}")
        self.path = path
        self.method = method


class ConflictingTypeError(SdkgenError):
    """Two different definitions were registered under the same type name."""

    def __init__(self, name: str):
        super().__init__(
            f"Type '{name}' is declared twice with different definitions "
            "(use --allow-redefinition to keep the last one)"
        )
        self.name = name


class UnknownLanguageError(SdkgenError):
    """No emitter is registered for the requested target language."""


class ConfigError(SdkgenError):
    """The configuration file is unreadable or holds invalid values."""
