"""Identifier casing for generated code.

Names coming out of the parsers are free text ("getPet response",
"pet_id", "/pets/{id}"). They are split into words and re-joined in the
case each target language expects. TypeScript record members are the
exception: they keep the JSON name, since axios hands back the raw body.
"""

import json
import re
from typing import Callable, NamedTuple

_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(identifier: str) -> list[str]:
    """Split on non-alphanumerics and lower-to-upper case boundaries."""
    return _WORD.findall(identifier)


def to_pascal_case(identifier: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(identifier))


def to_camel_case(identifier: str) -> str:
    words = split_words(identifier)
    if not words:
        return ""
    return words[0].lower() + "".join(word[:1].upper() + word[1:].lower() for word in words[1:])


_JS_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


def to_property_key(name: str) -> str:
    """Keep a JSON member name as is, quoted when it is not a valid identifier."""
    if _JS_IDENTIFIER.fullmatch(name):
        return name
    return json.dumps(name)


class CasingRules(NamedTuple):
    type_name: Callable[[str], str]
    record_member: Callable[[str], str]
    function_name: Callable[[str], str]
    parameter: Callable[[str], str]


TYPESCRIPT_CASING = CasingRules(
    type_name=to_pascal_case,
    record_member=to_property_key,
    function_name=to_camel_case,
    parameter=to_camel_case,
)

CSHARP_CASING = CasingRules(
    type_name=to_pascal_case,
    record_member=to_pascal_case,
    function_name=to_pascal_case,
    parameter=to_camel_case,
)
