"""Tests for the reference beta-reduction evaluator."""

from __future__ import annotations

import pytest

from cam.errors import StepLimitExceeded
from cam.normalizer import normalize, reduce, substitute
from cam.parser import parse
from cam.run import run
from cam.terms import Constant, Lambda, Variable
from cam.type_system import INT


class TestSubstitute:
    def test_replaces_free_occurrence(self):
        assert substitute(Variable("x"), "x", Variable("y")) == Variable("y")

    def test_bound_occurrence_untouched(self):
        term = parse("(lambda x. x)")
        assert substitute(term, "x", Variable("y")) == term

    def test_avoids_capture(self):
        # (lambda y. x)[x := y] must not capture the free y
        result = substitute(parse("(lambda y. x)"), "x", Variable("y"))
        assert isinstance(result, Lambda)
        assert result.param != "y"
        assert result.body == Variable("y")


class TestReduce:
    def test_beta_step(self):
        term, reduced = reduce(parse("((lambda x. x) y)"))
        assert reduced
        assert term == Variable("y")

    def test_normal_form_reports_no_step(self):
        term = parse("(lambda x. x)")
        assert reduce(term) == (term, False)

    def test_arithmetic_folds(self):
        assert reduce(parse("(2 * 3)")) == (Constant(6, INT), True)


class TestNormalize:
    def test_identity_on_free_variable(self):
        assert normalize(parse("((lambda x. x) y)")) == Variable("y")

    def test_constant_function(self):
        assert normalize(parse("((lambda x. false) true)")) == Variable("false")

    def test_higher_order(self):
        source = "((lambda f. (f true)) (lambda x. x))"
        assert normalize(parse(source)) == Variable("true")

    def test_omega_hits_step_limit(self):
        omega = "((lambda x. (x x)) (lambda x. (x x)))"
        with pytest.raises(StepLimitExceeded):
            normalize(parse(omega), max_steps=50)

    def test_normal_form_reached_on_last_allowed_step(self):
        assert normalize(parse("(1 + 2)"), max_steps=1) == Constant(3, INT)

    def test_one_step_short_raises(self):
        with pytest.raises(StepLimitExceeded):
            normalize(parse("((1 + 2) * 3)"), max_steps=1)

    @pytest.mark.parametrize(
        "source",
        [
            "((lambda x. (x + 1)) 42)",
            "((lambda x. ((lambda y. (x + y)) 10)) 32)",
            "(((lambda x. lambda y. x) 1) 2)",
            "(((lambda f. lambda x. (f (f x))) (lambda n. (n * 3))) 2)",
        ],
    )
    def test_agrees_with_machine(self, source):
        assert normalize(parse(source)) == Constant(run(source), INT)
