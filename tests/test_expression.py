"""
Output expression tests

Parser node shapes and the evaluator's resolution order and fallbacks.
"""

import pytest

from tagpress.lib.expression import evaluate, expression_parse, integer_is
from tagpress.models.context import RequestContext
from tagpress.models.expression import Literal, Lookup, Namespaced, Sum


@pytest.fixture
def context():
    return RequestContext(
        method="POST",
        url="/search?q=cats",
        host="example.test:8080",
        remoteaddr="10.0.0.7:51234",
        query={"q": "cats"},
        form={"who": "Ann", "q": "cats"},
    )


class TestParse:
    """Test node shapes produced by expression_parse"""

    def test_every_expression_is_a_lookup_first(self):
        node = expression_parse("  title  ")
        assert node == Lookup(name="title", fallback=Literal(text="title"))

    def test_namespaced(self):
        node = expression_parse("query.page")
        assert node.fallback == Namespaced(namespace="query", key="page", source="query.page")

    def test_sum(self):
        node = expression_parse("2 + 3")
        assert node.fallback == Sum(left="2", right="3", source="2 + 3")

    def test_two_plus_signs_is_literal(self):
        node = expression_parse("1 + 2 + 3")
        assert node.fallback == Literal(text="1 + 2 + 3")

    def test_namespace_wins_over_plus(self):
        node = expression_parse("query.a+b")
        assert isinstance(node.fallback, Namespaced)
        assert node.fallback.key == "a+b"


class TestScopeLookup:
    """Test that scope bindings come first"""

    def test_bound_name(self, context):
        assert evaluate("who", {"who": "World"}, context) == "World"

    def test_scope_shadows_request_namespace(self, context):
        assert evaluate("request.method", {"request.method": "custom"}, context) == "custom"

    def test_non_string_value_uses_default_form(self, context):
        assert evaluate("n", {"n": 42}, context) == "42"


class TestNamespaces:
    """Test request.*, query.* and form.*"""

    @pytest.mark.parametrize(
        "expr,expected",
        [
            ("request.method", "POST"),
            ("request.url", "/search?q=cats"),
            ("request.host", "example.test:8080"),
            ("request.remoteaddr", "10.0.0.7:51234"),
        ],
    )
    def test_request_fields(self, context, expr, expected):
        assert evaluate(expr, {}, context) == expected

    def test_unmapped_request_key_echoes(self, context):
        assert evaluate("request.cookies", {}, context) == "request.cookies"

    def test_query_value(self, context):
        assert evaluate("query.q", {}, context) == "cats"

    def test_missing_query_is_empty(self, context):
        assert evaluate("query.page", {}, context) == ""

    def test_form_value(self, context):
        assert evaluate("form.who", {}, context) == "Ann"

    def test_missing_form_is_empty(self, context):
        assert evaluate("form.nope", {}, context) == ""


class TestArithmetic:
    """Test the two-operand '+' rule"""

    def test_integer_sum(self, context):
        assert evaluate("2 + 3", {}, context) == "5"

    def test_signed_integers(self, context):
        assert evaluate("-2 + 5", {}, context) == "3"

    def test_non_numeric_operands_concatenate_without_plus(self, context):
        assert evaluate("ab + cd", {}, context) == "abcd"

    def test_mixed_operands_concatenate(self, context):
        assert evaluate("2 + x", {}, context) == "2x"

    def test_operands_are_not_resolved_from_scope(self, context):
        """Operands are taken literally, never looked up"""
        assert evaluate("a + b", {"a": "1", "b": "2"}, context) == "ab"

    def test_more_than_one_plus_echoes(self, context):
        assert evaluate("1 + 2 + 3", {}, context) == "1 + 2 + 3"

    def test_integer_is(self):
        assert integer_is("12")
        assert integer_is("+7")
        assert not integer_is("1.5")
        assert not integer_is("1_000")
        assert not integer_is("")

    def test_integer_is_bounded_to_64_bits(self):
        assert integer_is("9223372036854775807")
        assert integer_is("-9223372036854775808")
        assert not integer_is("9223372036854775808")
        assert not integer_is("-9223372036854775809")

    def test_out_of_range_operands_concatenate(self, context):
        assert evaluate("9223372036854775808 + 1", {}, context) == "92233720368547758081"


class TestFallback:
    """Test the literal echo rule"""

    def test_unknown_expression_echoes(self, context):
        assert evaluate("totallyUnknown", {}, context) == "totallyUnknown"

    def test_echo_is_trimmed(self, context):
        assert evaluate("  spaced out  ", {}, context) == "spaced out"
