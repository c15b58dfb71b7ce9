# ABOUTME: Tests for Tree-sitter JavaScript parsing and AST shape helpers
# ABOUTME: Validates grammar loading, file detection, traversal order and literal handling

import pytest

from analysis.ast_util import (
    get_argument,
    get_arguments,
    get_caller,
    get_method_call_on,
    get_method_name,
    is_addition,
    iter_nodes,
    node_text,
    number_value,
    string_value,
    template_expressions,
    template_quasis,
)
from analysis.grammar import GrammarStatus, JavaScriptGrammar


@pytest.fixture
def grammar() -> JavaScriptGrammar:
    return JavaScriptGrammar.shared()


def first_node(grammar: JavaScriptGrammar, code: str, node_type: str):
    tree = grammar.parse(code)
    return next(node for node in iter_nodes(tree.root_node) if node.type == node_type)


class TestJavaScriptGrammar:
    """Test grammar management"""

    def test_grammar_initialization(self, grammar: JavaScriptGrammar) -> None:
        assert grammar.status == GrammarStatus.AVAILABLE
        assert JavaScriptGrammar.shared() is grammar

    def test_grammar_validation(self, grammar: JavaScriptGrammar) -> None:
        assert grammar.validate_grammar() is True

    @pytest.mark.parametrize("path,expected", [
        ("app.js", True),
        ("component.jsx", True),
        ("module.mjs", True),
        ("config.cjs", True),
        ("APP.JS", True),
        ("app.ts", False),
        ("notes.txt", False),
    ])
    def test_lintable_files(self, path: str, expected: bool) -> None:
        assert JavaScriptGrammar.is_lintable(path) is expected

    def test_parse_bytes_and_str(self, grammar: JavaScriptGrammar) -> None:
        assert grammar.parse(b"var a = 1;").root_node.type == "program"
        assert grammar.parse("var a = 1;").root_node.type == "program"

    def test_syntax_errors_still_parse(self, grammar: JavaScriptGrammar) -> None:
        tree = grammar.parse("_.get(o, ['a'];")
        assert tree.root_node.has_error


class TestTraversal:
    """Test source-order traversal"""

    def test_calls_in_source_order(self, grammar: JavaScriptGrammar) -> None:
        tree = grammar.parse("a(b(c()));\nd();")
        calls = [node_text(n) for n in iter_nodes(tree.root_node) if n.type == "call_expression"]
        assert calls == ["a(b(c()))", "b(c())", "c()", "d()"]

    def test_deep_nesting(self, grammar: JavaScriptGrammar) -> None:
        code = "x" + "".join("[0]" for _ in range(3000))
        tree = grammar.parse(code)
        assert sum(1 for _ in iter_nodes(tree.root_node)) > 3000


class TestCallHelpers:
    """Test call and member expression helpers"""

    def test_arguments(self, grammar: JavaScriptGrammar) -> None:
        call = first_node(grammar, "f(a, /* note */ (b), c);", "call_expression")
        assert [node_text(a) for a in get_arguments(call)] == ["a", "(b)", "c"]
        assert node_text(get_argument(call, 1)) == "b"
        assert get_argument(call, 3) is None
        assert get_argument(call, -1) is None

    def test_tagged_template_has_no_arguments(self, grammar: JavaScriptGrammar) -> None:
        call = first_node(grammar, "tag`a.b`;", "call_expression")
        assert get_arguments(call) == []

    def test_method_call_parts(self, grammar: JavaScriptGrammar) -> None:
        call = first_node(grammar, "a.b.c(1);", "call_expression")
        assert get_method_name(call) == "c"
        assert node_text(get_caller(call)) == "a.b"

    def test_computed_member_has_no_method_name(self, grammar: JavaScriptGrammar) -> None:
        call = first_node(grammar, "a['b'](1);", "call_expression")
        assert get_method_name(call) is None

    def test_method_call_on(self, grammar: JavaScriptGrammar) -> None:
        tree = grammar.parse("_(x).map(f).value();")
        calls = [n for n in iter_nodes(tree.root_node) if n.type == "call_expression"]
        start = calls[-1]
        assert node_text(start) == "_(x)"
        assert node_text(get_method_call_on(start)) == "_(x).map(f)"
        assert get_method_call_on(calls[0]) is None

    def test_method_call_on_parenthesized_receiver(self, grammar: JavaScriptGrammar) -> None:
        start = first_node(grammar, "(_(x)).map(f);", "call_expression")
        start = next(n for n in iter_nodes(start) if node_text(n) == "_(x)")
        assert node_text(get_method_call_on(start)) == "(_(x)).map(f)"


class TestLiteralHelpers:
    """Test literal decoding"""

    @pytest.mark.parametrize("literal,value", [
        ("'a.b'", "a.b"),
        ('"a\\"b"', 'a"b'),
        ("'it\\'s'", "it's"),
        ("'\\x41\\u0042\\u{43}'", "ABC"),
        ("'tab\\there'", "tab\there"),
        ("''", ""),
    ])
    def test_string_value(self, grammar: JavaScriptGrammar, literal: str, value: str) -> None:
        node = first_node(grammar, f"x = {literal};", "string")
        assert string_value(node) == value

    def test_template_parts(self, grammar: JavaScriptGrammar) -> None:
        node = first_node(grammar, "x = `a.${b}[${c}]`;", "template_string")
        assert [node_text(e) for e in template_expressions(node)] == ["${b}", "${c}"]
        assert template_quasis(node) == ["a.", "[", "]"]

    def test_template_without_substitutions(self, grammar: JavaScriptGrammar) -> None:
        node = first_node(grammar, "x = `plain`;", "template_string")
        assert template_quasis(node) == ["plain"]

    @pytest.mark.parametrize("code,expected", [
        ("x = a + b;", True),
        ("x = a - b;", False),
        ("x = a += b;", False),
    ])
    def test_addition(self, grammar: JavaScriptGrammar, code: str, expected: bool) -> None:
        node = first_node(grammar, code, "assignment_expression").child_by_field_name("right")
        assert is_addition(node) is expected

    @pytest.mark.parametrize("literal,value", [
        ("42", "42"),
        ("0xff", "255"),
        ("0o10", "8"),
        ("0b11", "3"),
        ("010", "8"),
        ("1.50", "1.5"),
        ("1e3", "1000"),
        ("0.000001", "0.000001"),
        ("1e-7", "1e-7"),
        ("1.5e22", "1.5e+22"),
        ("10n", None),
    ])
    def test_number_value(self, grammar: JavaScriptGrammar, literal: str, value) -> None:
        node = first_node(grammar, f"x = {literal};", "number")
        assert number_value(node) == value
