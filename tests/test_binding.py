"""Tests for the declarative binding parser."""

import operator

import pytest

from digestflow import Binding, BindingParseError, parse


class TestParse:
    def test_comma_separated_inputs(self):
        [b] = parse({"c": ("a, b", lambda a, b: a + b)})
        assert b.inputs == ("a", "b")
        assert b.output == "c"
        assert b.callback(2, 3) == 5

    def test_sequence_inputs(self):
        [b] = parse({"total": (["price", " quantity "], operator.mul)})
        assert b.inputs == ("price", "quantity")

    def test_inputs_from_parameter_names(self):
        def full_name(first, last):
            return f"{first} {last}"

        [b] = parse({"name": full_name})
        assert b.inputs == ("first", "last")

    def test_preserves_mapping_order(self):
        bindings = parse({
            "b": ("a", lambda a: a),
            "c": ("b", lambda b: b),
            "d": ("c", lambda c: c),
        })
        assert [b.output for b in bindings] == ["b", "c", "d"]

    def test_unresolved_after_parse(self):
        [b] = parse({"b": ("a", lambda a: a)})
        assert b.in_nodes is None
        assert b.out_node is None
        assert b.node is None
        assert not b.resolved

    def test_repr(self):
        def double(a):
            return a * 2

        [b] = parse({"b": ("a", double)})
        assert repr(b) == "Binding(a -> b, double)"


class TestParseErrors:
    def test_empty_inputs(self):
        with pytest.raises(BindingParseError, match="no inputs"):
            parse({"b": ("", lambda: 1)})

    def test_blank_input_name(self):
        with pytest.raises(BindingParseError):
            parse({"c": ("a, , b", lambda a, b, c: 1)})

    def test_empty_output(self):
        with pytest.raises(BindingParseError):
            parse({" ": ("a", lambda a: a)})

    def test_non_callable(self):
        with pytest.raises(BindingParseError, match="not callable"):
            parse({"b": ("a", 42)})

    def test_wrong_shape(self):
        with pytest.raises(BindingParseError):
            parse({"b": "a"})

    def test_arity_mismatch(self):
        with pytest.raises(BindingParseError, match="2 positional"):
            parse({"c": ("a, b", lambda a: a)})

    def test_varargs_accepts_any_arity(self):
        [b] = parse({"s": ("a, b, c", lambda *xs: sum(xs))})
        assert b.callback(1, 2, 3) == 6

    def test_callable_without_parameters(self):
        with pytest.raises(BindingParseError, match="no inputs"):
            parse({"b": lambda: 1})

    def test_is_a_value_error(self):
        assert issubclass(BindingParseError, ValueError)


def test_binding_resolved_flag():
    b = Binding(["a"], "b", lambda a: a)
    b.in_nodes = (1,)
    assert not b.resolved
    b.out_node = 2
    assert b.resolved
