# ABOUTME: Property path notation classifier and converter
# ABOUTME: Classifies path arguments by shape and rewrites them into the configured style

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

import tree_sitter as ts

from analysis.ast_util import (
    array_elements,
    is_addition,
    is_array_expression,
    is_literal,
    is_string_literal,
    is_template_literal,
    literal_value_text,
    node_text,
    string_value,
    template_expressions,
    template_quasis,
    unwrap_parenthesized,
)
from analysis.verdict import Verdict
from models import MessageKind, PathStyle, PathStyleOptions
from parsers.path import (
    can_be_dot_notation,
    escape_template_text,
    format_array_path,
    from_path,
    to_path,
)

logger = logging.getLogger(__name__)


class PathShape(Enum):
    """Syntactic shape of a property path argument"""
    ARRAY_OF_LITERALS = "array_of_literals"
    ARRAY = "array"
    STRING = "string"
    TEMPLATE = "template"
    UNSAFE_TEMPLATE = "unsafe_template"
    CONCATENATION = "concatenation"
    UNSAFE_CONCATENATION = "unsafe_concatenation"
    DYNAMIC = "dynamic"


def is_prop_access(char: str) -> bool:
    return char in (".", "[")


def ends_with_prop_access(text: str) -> bool:
    return bool(text) and is_prop_access(text[-1])


def starts_with_prop_access(text: str) -> bool:
    return bool(text) and is_prop_access(text[0])


def is_array_of_literals(node: Optional[ts.Node]) -> bool:
    if not is_array_expression(node):
        return False
    elements = array_elements(node)
    return bool(elements) and all(is_literal(el) for el in elements)


def is_safe_string(node: Optional[ts.Node]) -> bool:
    """A plain string literal; nothing can be interpolated into it"""
    return is_string_literal(node)


def concatenation_operands(node: ts.Node) -> List[ts.Node]:
    """Operands of a `+` chain, left to right"""
    if not is_addition(node):
        return [node]
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    operands: List[ts.Node] = []
    for side in (left, right):
        if side is not None:
            operands.extend(concatenation_operands(side))
    return operands


def is_string_concat_with_variable_props(node: Optional[ts.Node]) -> bool:
    """A `+` chain that glues a variable onto a `.` or `[` of a literal"""
    if not is_addition(node):
        return False
    operands = concatenation_operands(node)
    for before, after in zip(operands, operands[1:]):
        if is_string_literal(before) and not is_literal(after):
            if ends_with_prop_access(string_value(before)):
                return True
        if not is_literal(before) and is_string_literal(after):
            if starts_with_prop_access(string_value(after)):
                return True
    return False


def is_template_string_with_variable_props(node: Optional[ts.Node]) -> bool:
    """A template whose substitution sits right next to a `.` or `[`"""
    if not is_template_literal(node):
        return False
    quasis = template_quasis(node)
    for index in range(len(template_expressions(node))):
        if ends_with_prop_access(quasis[index]) or starts_with_prop_access(quasis[index + 1]):
            return True
    return False


def classify_path_node(node: Optional[ts.Node]) -> PathShape:
    node = unwrap_parenthesized(node)
    if is_array_expression(node):
        return PathShape.ARRAY_OF_LITERALS if is_array_of_literals(node) else PathShape.ARRAY
    if is_safe_string(node):
        return PathShape.STRING
    if is_template_literal(node):
        if is_template_string_with_variable_props(node):
            return PathShape.UNSAFE_TEMPLATE
        return PathShape.TEMPLATE
    if is_addition(node):
        if is_string_concat_with_variable_props(node):
            return PathShape.UNSAFE_CONCATENATION
        return PathShape.CONCATENATION
    return PathShape.DYNAMIC


def _is_convertible_array(node: ts.Node) -> bool:
    elements = array_elements(node)
    return bool(elements) and not any(el.type == "spread_element" for el in elements)


def convert_to_string_style_without_variables(node: ts.Node) -> Optional[str]:
    keys = [literal_value_text(el) for el in array_elements(node)]
    if any(key is None for key in keys):
        return None
    return from_path(keys)


def convert_to_string_style_with_variables(node: ts.Node) -> Optional[str]:
    """`a[${key}].b` from ['a', key, 'b']"""
    segments = []
    for el in array_elements(node):
        if is_literal(el):
            value = literal_value_text(el)
            if value is None:
                return None
            segment = f".{value}" if can_be_dot_notation(value) else f"[{value}]"
            segments.append(escape_template_text(segment))
        else:
            segments.append("[${" + node_text(el) + "}]")
    body = "".join(segments)
    if body.startswith("."):
        body = body[1:]
    return f"`{body}`"


def convert_to_string_style(node: ts.Node, has_variables: bool) -> Optional[str]:
    if not has_variables or is_array_of_literals(node):
        return convert_to_string_style_without_variables(node)
    return convert_to_string_style_with_variables(node)


def convert_to_array_style(node: ts.Node) -> str:
    return format_array_path(to_path(string_value(node)))


class PathStyleClassifier:
    """
    Checks a property path argument against the preferred notation.

    as-needed: literal arrays become strings; strings glued to variables
               should be arrays
    array:     every string or template path should be an array
    string:    every array path should be a string
    """

    def __init__(self, options: PathStyleOptions) -> None:
        self.style = options.style
        self._handlers: Dict[PathStyle, Callable[[ts.Node, PathShape], Verdict]] = {
            PathStyle.AS_NEEDED: self._check_as_needed,
            PathStyle.ARRAY: self._check_array,
            PathStyle.STRING: self._check_string,
        }

    def classify_and_maybe_rewrite(self, path_node: ts.Node) -> Verdict:
        node = unwrap_parenthesized(path_node)
        if node is None:
            return Verdict.compliant()
        return self._handlers[self.style](node, classify_path_node(node))

    def _check_as_needed(self, node: ts.Node, shape: PathShape) -> Verdict:
        if shape == PathShape.ARRAY_OF_LITERALS:
            return Verdict.violation(
                node,
                MessageKind.STRING_FOR_SIMPLE,
                convert_to_string_style(node, has_variables=False),
            )
        if shape in (PathShape.UNSAFE_CONCATENATION, PathShape.UNSAFE_TEMPLATE):
            return Verdict.violation(node, MessageKind.ARRAY_FOR_VARS)
        return Verdict.compliant()

    def _check_array(self, node: ts.Node, shape: PathShape) -> Verdict:
        if shape == PathShape.STRING:
            return Verdict.violation(node, MessageKind.ARRAY, convert_to_array_style(node))
        if shape in (PathShape.TEMPLATE, PathShape.UNSAFE_TEMPLATE):
            # Segment boundaries depend on runtime values
            return Verdict.violation(node, MessageKind.ARRAY)
        return Verdict.compliant()

    def _check_string(self, node: ts.Node, shape: PathShape) -> Verdict:
        if shape not in (PathShape.ARRAY_OF_LITERALS, PathShape.ARRAY):
            return Verdict.compliant()
        if not _is_convertible_array(node):
            logger.debug(f"Array path at byte {node.start_byte} has no string equivalent")
            return Verdict.violation(node, MessageKind.STRING)
        return Verdict.violation(
            node, MessageKind.STRING, convert_to_string_style(node, has_variables=True)
        )
