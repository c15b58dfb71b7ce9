from enum import Enum
from typing import Dict

from pydantic import BaseModel


class ChainMode(str, Enum):
    ALWAYS = "always"
    NEVER = "never"
    IMPLICIT = "implicit"


class PathStyle(str, Enum):
    AS_NEEDED = "as-needed"
    ARRAY = "array"
    STRING = "string"


class MessageKind(str, Enum):
    SINGLE = "single"
    NEVER = "never"
    ALWAYS = "always"
    STRING_FOR_SIMPLE = "stringForSimple"
    ARRAY_FOR_VARS = "arrayForVars"
    ARRAY = "array"
    STRING = "string"


class CallType(str, Enum):
    METHOD = "method"  # _.get(obj, path)
    CHAINED = "chained"  # _(obj).get(path)
    SINGLE = "single"  # get(obj, path) from a single-method import


class RuleName(str, Enum):
    CHAINING = "chaining"
    PATH_STYLE = "path-style"


MESSAGES: Dict[MessageKind, str] = {
    MessageKind.SINGLE: "Do not use chain syntax for single method",
    MessageKind.NEVER: "Prefer composition to Lodash chaining",
    MessageKind.ALWAYS: "Prefer chaining to composition",
    MessageKind.STRING_FOR_SIMPLE: "Use a string for simple paths",
    MessageKind.ARRAY_FOR_VARS: "Use an array for paths with variables",
    MessageKind.ARRAY: "Use an array for paths",
    MessageKind.STRING: "Use a string for paths",
}


class LintBaseModel(BaseModel):
    class Config:
        frozen = True
        extra = "forbid"
