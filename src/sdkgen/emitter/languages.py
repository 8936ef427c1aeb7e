"""Lookup of emitters by target language name."""

from sdkgen.emitter.base import SdkEmitter
from sdkgen.emitter.csharp import CSharpEmitter
from sdkgen.emitter.typescript import TypeScriptEmitter
from sdkgen.errors import UnknownLanguageError

EMITTERS: dict[str, type[SdkEmitter]] = {
    TypeScriptEmitter.language: TypeScriptEmitter,
    CSharpEmitter.language: CSharpEmitter,
}

# Accepted spellings besides the canonical names
_ALIASES = {"ts": "typescript", "cs": "csharp", "c#": "csharp"}


def get_emitter(language: str) -> SdkEmitter:
    name = language.lower()
    name = _ALIASES.get(name, name)
    try:
        return EMITTERS[name]()
    except KeyError:
        known = ", ".join(sorted(EMITTERS))
        raise UnknownLanguageError(f"No emitter for language '{language}' (known: {known})") from None
