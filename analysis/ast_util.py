# ABOUTME: Shape queries over Tree-sitter JavaScript nodes
# ABOUTME: Read-only helpers for calls, member access, literals and template strings

import math
import re
from decimal import Decimal
from typing import Iterator, List, Optional

import tree_sitter as ts

LITERAL_TYPES = {"string", "number", "true", "false", "null", "regex"}
COMMENT_TYPE = "comment"

_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}
_LEGACY_OCTAL = re.compile(r"^0[0-7]+$")

_JS_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_ESCAPE_SEQUENCE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)


def node_text(node: ts.Node) -> str:
    """Source text covered by a node"""
    text = node.text
    return text.decode("utf-8") if text is not None else ""


def iter_nodes(root: ts.Node) -> Iterator[ts.Node]:
    """Pre-order traversal, so nodes come out in source order"""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def unwrap_parenthesized(node: Optional[ts.Node]) -> Optional[ts.Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type != COMMENT_TYPE]
        node = inner[0] if inner else None
    return node


def is_call_expression(node: Optional[ts.Node]) -> bool:
    return node is not None and node.type == "call_expression"


def get_callee(node: ts.Node) -> Optional[ts.Node]:
    return node.child_by_field_name("function")


def get_arguments(node: ts.Node) -> List[ts.Node]:
    """Argument nodes of a call, comments excluded"""
    args = node.child_by_field_name("arguments")
    # Tagged templates carry a template_string instead of an argument list
    if args is None or args.type != "arguments":
        return []
    return [child for child in args.named_children if child.type != COMMENT_TYPE]


def get_argument(node: ts.Node, index: int) -> Optional[ts.Node]:
    if index < 0:
        return None
    args = get_arguments(node)
    return unwrap_parenthesized(args[index]) if index < len(args) else None


def is_member_expression(node: Optional[ts.Node]) -> bool:
    return node is not None and node.type == "member_expression"


def is_method_call(node: Optional[ts.Node]) -> bool:
    """A call whose callee is a property access: obj.method()"""
    return is_call_expression(node) and is_member_expression(get_callee(node))


def get_caller(node: ts.Node) -> Optional[ts.Node]:
    """Receiver of a method call: `a.b` in `a.b.c()`"""
    callee = get_callee(node)
    if not is_member_expression(callee):
        return None
    return callee.child_by_field_name("object")


def get_method_name(node: ts.Node) -> Optional[str]:
    callee = get_callee(node)
    if not is_member_expression(callee):
        return None
    prop = callee.child_by_field_name("property")
    if prop is None or prop.type != "property_identifier":
        return None
    return node_text(prop)


def get_identifier_name(node: Optional[ts.Node]) -> Optional[str]:
    if node is None or node.type != "identifier":
        return None
    return node_text(node)


def is_object_of_member(node: ts.Node) -> bool:
    parent = node.parent
    return (
        is_member_expression(parent)
        and parent.child_by_field_name("object") == node
    )


def get_method_call_on(node: ts.Node) -> Optional[ts.Node]:
    """The call `node.method()` applied directly to node, if any"""
    while node.parent is not None and node.parent.type == "parenthesized_expression":
        node = node.parent
    if not is_object_of_member(node):
        return None
    member = node.parent
    call = member.parent
    if is_call_expression(call) and get_callee(call) == member:
        return call
    return None


def is_object_of_method_call(node: ts.Node) -> bool:
    return get_method_call_on(node) is not None


def is_literal(node: Optional[ts.Node]) -> bool:
    return node is not None and node.type in LITERAL_TYPES


def is_string_literal(node: Optional[ts.Node]) -> bool:
    return node is not None and node.type == "string"


def is_template_literal(node: Optional[ts.Node]) -> bool:
    return node is not None and node.type == "template_string"


def is_array_expression(node: Optional[ts.Node]) -> bool:
    return node is not None and node.type == "array"


def is_addition(node: Optional[ts.Node]) -> bool:
    if node is None or node.type != "binary_expression":
        return False
    operator = node.child_by_field_name("operator")
    return operator is not None and operator.type == "+"


def array_elements(node: ts.Node) -> List[ts.Node]:
    return [child for child in node.named_children if child.type != COMMENT_TYPE]


def _unescape(match: "re.Match[str]") -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq.startswith("u") and len(seq) == 5:
        return chr(int(seq[1:], 16))
    if seq.startswith("x") and len(seq) == 3:
        return chr(int(seq[1:], 16))
    if seq in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        # Line continuation
        return ""
    return _JS_ESCAPES.get(seq, seq)


def string_value(node: ts.Node) -> str:
    """Cooked value of a string literal node"""
    raw = node_text(node)[1:-1]
    return _ESCAPE_SEQUENCE.sub(_unescape, raw)


def _format_js_number(value: float) -> str:
    """Number::toString for a finite non-negative double"""
    if value == 0:
        return "0"
    _, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k
    if k <= n <= 21:
        return digits + "0" * (n - k)
    if 0 < n <= 21:
        return f"{digits[:n]}.{digits[n:]}"
    if -6 < n <= 0:
        return "0." + "0" * -n + digits
    e = n - 1
    mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def number_value(node: ts.Node) -> Optional[str]:
    """
    Value of a number literal as JavaScript converts it to a property key.

    0x10 -> "16", 1.50 -> "1.5", 1e3 -> "1000". BigInt literals and values
    that overflow a double have no key form and give None.
    """
    text = node_text(node).replace("_", "").lower()
    if not text or text.endswith("n"):
        return None
    try:
        if text[:2] in _RADIX_PREFIXES:
            value = float(int(text[2:], _RADIX_PREFIXES[text[:2]]))
        elif _LEGACY_OCTAL.match(text):
            value = float(int(text, 8))
        else:
            value = float(text)
    except (ValueError, OverflowError):
        return None
    if math.isinf(value) or math.isnan(value):
        return None
    return _format_js_number(value)


def literal_value_text(node: ts.Node) -> Optional[str]:
    """
    Value of a literal as it appears inside a path: strings cooked, numbers
    normalised, others raw. None when the value has no faithful key text.
    """
    if is_string_literal(node):
        return string_value(node)
    if node.type == "number":
        return number_value(node)
    return node_text(node)


def template_expressions(node: ts.Node) -> List[ts.Node]:
    return [child for child in node.named_children if child.type == "template_substitution"]


def template_quasis(node: ts.Node) -> List[str]:
    """
    Raw text chunks of a template string around its substitutions.

    Always one more chunk than substitutions, mirroring ESTree's quasis.
    """
    source = node.text or b""
    base = node.start_byte
    chunks = []
    cursor = 1  # skip opening backtick
    for substitution in template_expressions(node):
        chunks.append(source[cursor:substitution.start_byte - base].decode("utf-8"))
        cursor = substitution.end_byte - base
    chunks.append(source[cursor:len(source) - 1].decode("utf-8"))
    return chunks
