"""Tests for the routine body rewriter."""

import esprima
import pytest

from cwise.cwise_anchor import AnchorExtractor
from cwise.cwise_exceptions import CwiseUnsupportedError
from cwise.cwise_names import RoutineNamer
from cwise.cwise_rewriter import RoutineRewriter, get_usage
from cwise.cwise_types import Usage


def _expression(source: str):
    return esprima.parseScript(source, {'range': True}).body[0].expression


def _rewriter(source: str, is_global=lambda name: name == 'Math') -> RoutineRewriter:
    anchored = AnchorExtractor().extract(source)
    return RoutineRewriter(anchored, RoutineNamer("_p_0_", "_p_"), is_global)


class TestGetUsage:
    """Test usage classification from the parent node."""

    def test_plain_assignment_target(self):
        """Test the target of `=`."""
        expr = _expression("a = 1")

        assert get_usage(expr.left, expr) == Usage.WRITE

    @pytest.mark.parametrize("operator", ['+=', '-=', '*=', '/=', '%=', '<<=', '>>>=', '|='])
    def test_compound_assignment_target(self, operator):
        """Test the target of compound assignments."""
        expr = _expression(f"a {operator} 1")

        assert get_usage(expr.left, expr) == Usage.WRITE | Usage.READ

    def test_assignment_value(self):
        """Test the value side of an assignment."""
        expr = _expression("a = b")

        assert get_usage(expr.right, expr) == Usage.READ

    @pytest.mark.parametrize("source", ["a++", "a--", "++a", "--a"])
    def test_update_operand(self, source):
        """Test increment and decrement operands."""
        expr = _expression(source)

        assert get_usage(expr.argument, expr) == Usage.WRITE | Usage.READ

    def test_other_parent(self):
        """Test an ordinary expression operand."""
        expr = _expression("a + b")

        assert get_usage(expr.left, expr) == Usage.READ

    def test_no_parent(self):
        """Test a node without a parent."""
        expr = _expression("a")

        assert get_usage(expr, None) == Usage.READ


class TestRoutineRewriter:
    """Test the rewriter directly."""

    def test_rewrite_and_arguments(self):
        """Test body text and argument usage from one walk."""
        rewriter = _rewriter("function(x, y) { y = Math.abs(x); return y }")

        assert rewriter.rewrite() == "{ _p_0_arg1_ = Math.abs(_p_0_arg0_); return _p_0_arg1_ }"

        args = rewriter.arguments()
        assert [(a.is_written, a.is_read, a.occurrence_count) for a in args] == [
            (False, True, 1),
            (True, True, 2),
        ]

    def test_repeated_parameter_name(self):
        """Test that a repeated parameter name binds to its first declaration."""
        rewriter = _rewriter("function(a, a) { return a }")

        assert rewriter.rewrite() == "{ return _p_0_arg0_ }"
        assert rewriter.arguments()[1].occurrence_count == 0

    def test_nested_function_names_are_lexical(self):
        """Test that names in a nested function are matched by name only."""
        rewriter = _rewriter("function(a) { return [1].map(function(a) { return a + k }) }")

        assert rewriter.rewrite() == (
            "{ return [1].map(function(_p_0_arg0_) { return _p_0_arg0_ + _p_0_k }) }"
        )
        assert rewriter.arguments()[0].occurrence_count == 2

    def test_labels_renamed_consistently(self):
        """Test that statement labels are renamed like locals."""
        rewriter = _rewriter("function() { outer: for (;;) { break outer } }")

        assert rewriter.rewrite() == "{ _p_0_outer: for (;;) { break _p_0_outer } }"

    def test_eval_parameter_rejected(self):
        """Test that a parameter named eval is refused."""
        with pytest.raises(CwiseUnsupportedError) as exc_info:
            _rewriter("function(eval) { return 1 }")

        assert exc_info.value.error_details['construct'] == 'eval'

    def test_rejection_reports_range(self):
        """Test that a rejection names the offending source range."""
        rewriter = _rewriter("function() { return this }")

        with pytest.raises(CwiseUnsupportedError) as exc_info:
            rewriter.rewrite()

        start, end = exc_info.value.error_details['range']
        assert rewriter._anchored.text[start:end] == "this"

    def test_shorthand_with_default_in_pattern(self):
        """Test that a destructuring default keeps its key."""
        rewriter = _rewriter("function(o) { var {w = 1} = o; return w }")

        assert rewriter.rewrite() == "{ var {w: _p_0_w = 1} = _p_0_arg0_; return _p_0_w }"

    def test_template_literal_expressions(self):
        """Test that template literal expressions are walked."""
        rewriter = _rewriter("function(a) { return `v${a}` }")

        assert rewriter.rewrite() == "{ return `v${_p_0_arg0_}` }"
