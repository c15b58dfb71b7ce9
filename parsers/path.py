# ABOUTME: Property path grammar shared by the path-style rule
# ABOUTME: Splits string paths the way lodash's toPath does and renders keys back to source

import re
from typing import List, Sequence

# Same alternation as lodash's rePropName: bare segments, bracketed segments
# (quoted or not) and empty segments produced by "..", ".[]" or a trailing "."
_PROP_NAME = re.compile(
    r"""[^.[\]]+"""
    r"""|\[(?:([^"'][^[]*)|(["'])((?:(?!\2)[^\\]|\\.)*?)\2)\]"""
    r"""|(?=(?:\.|\[\])(?:\.|\[\]|$))"""
)
_ESCAPE_CHAR = re.compile(r"\\(\\)?")

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")


def to_path(path: str) -> List[str]:
    """
    Split a string property path into its keys.

    >>> to_path("a.b[0]")
    ['a', 'b', '0']
    >>> to_path('a["b.c"]')
    ['a', 'b.c']
    """
    result: List[str] = []
    if path.startswith("."):
        result.append("")

    for match in _PROP_NAME.finditer(path):
        unquoted, quote, quoted = match.group(1), match.group(2), match.group(3)
        if quote:
            result.append(_ESCAPE_CHAR.sub(lambda m: m.group(1) or "", quoted))
        else:
            result.append(unquoted or match.group(0))
    return result


def can_be_dot_notation(key: str) -> bool:
    """Whether a key may be written as `.key` in a string path"""
    return bool(IDENTIFIER_PATTERN.match(key))


def join_path_segments(keys: Sequence[str]) -> str:
    """Render keys as a string path body (no quotes): a.b[0]"""
    rendered = "".join(
        f".{key}" if can_be_dot_notation(key) else f"[{key}]" for key in keys
    )
    return rendered[1:] if rendered.startswith(".") else rendered


def quote_js_string(value: str, quote: str = "'") -> str:
    """Wrap a value in a JavaScript string literal"""
    escaped = value.replace("\\", "\\\\").replace(quote, f"\\{quote}")
    escaped = escaped.replace("\n", "\\n").replace("\r", "\\r")
    return f"{quote}{escaped}{quote}"


def escape_template_text(value: str) -> str:
    """Escape literal text placed inside a template string"""
    return value.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def format_array_path(keys: Sequence[str]) -> str:
    """
    Render keys as an array literal of quoted strings.

    >>> format_array_path(["a", "b"])
    "['a', 'b']"
    """
    return "[" + ", ".join(quote_js_string(key) for key in keys) + "]"


def from_path(keys: Sequence[str]) -> str:
    """
    Render literal keys as a single-quoted string path.

    >>> from_path(["a", "b", "0"])
    "'a.b[0]'"
    """
    return quote_js_string(join_path_segments(keys))
