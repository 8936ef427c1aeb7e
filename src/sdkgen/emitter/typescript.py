"""TypeScript SDK emitter (axios based)."""

from sdkgen.core.types import Primitive
from sdkgen.emitter.base import TemplateEmitter
from sdkgen.emitter.casing import TYPESCRIPT_CASING


class TypeScriptEmitter(TemplateEmitter):
    language = "typescript"
    file_extension = ".ts"

    template_name = "typescript.ts.j2"
    casing = TYPESCRIPT_CASING
    primitives = {
        Primitive.STRING: "string",
        Primitive.BOOLEAN: "boolean",
        Primitive.INTEGER: "number",
        Primitive.FLOAT: "number",
        Primitive.DOUBLE: "number",
    }
    array_format = "{element}[]"
    map_format = "Record<{key}, {value}>"
    parameter_format = "{name}: {type}"
    url_parameter_format = "${{{name}}}"
