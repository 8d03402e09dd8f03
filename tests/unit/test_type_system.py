"""Tests for type expressions, fresh variables and substitutions."""

from __future__ import annotations

from cam.type_system import (
    BOOL,
    INT,
    Substitution,
    TypeArrow,
    TypeVar,
    TypeVarGenerator,
    alpha_equivalent,
    arrow,
    free_type_vars,
)


class TestRendering:
    def test_const(self):
        assert str(INT) == "Int"

    def test_var(self):
        assert str(TypeVar(3)) == "'t3"

    def test_arrow_is_right_associative(self):
        assert str(arrow(INT, BOOL, INT)) == "Int -> Bool -> Int"

    def test_left_nested_arrow_parenthesised(self):
        assert str(TypeArrow(TypeArrow(INT, INT), BOOL)) == "(Int -> Int) -> Bool"


class TestGenerator:
    def test_fresh_ids_are_monotonic(self):
        gen = TypeVarGenerator()
        assert [gen.fresh(), gen.fresh()] == [TypeVar(0), TypeVar(1)]
        assert gen.issued == 2

    def test_reset_restarts_numbering(self):
        gen = TypeVarGenerator()
        gen.fresh()
        gen.reset()
        assert gen.fresh() == TypeVar(0)

    def test_generators_are_independent(self):
        a, b = TypeVarGenerator(), TypeVarGenerator()
        a.fresh()
        assert b.fresh() == TypeVar(0)


class TestSubstitution:
    def test_resolve_chases_chain(self):
        subs = Substitution()
        subs.bind(TypeVar(0), TypeVar(1))
        subs.bind(TypeVar(1), INT)
        assert subs.resolve(TypeVar(0)) == INT

    def test_resolve_stops_at_unbound_var(self):
        subs = Substitution()
        subs.bind(TypeVar(0), TypeVar(1))
        assert subs.resolve(TypeVar(0)) == TypeVar(1)

    def test_resolve_is_shallow(self):
        subs = Substitution()
        subs.bind(TypeVar(0), INT)
        t = TypeArrow(TypeVar(0), BOOL)
        assert subs.resolve(t) is t

    def test_apply_rewrites_inside_arrows(self):
        subs = Substitution()
        subs.bind(TypeVar(0), INT)
        subs.bind(TypeVar(1), TypeArrow(TypeVar(0), TypeVar(2)))
        assert subs.apply(TypeVar(1)) == TypeArrow(INT, TypeVar(2))

    def test_contains(self):
        subs = Substitution()
        subs.bind(TypeVar(4), BOOL)
        assert TypeVar(4) in subs
        assert TypeVar(5) not in subs
        assert len(subs) == 1


class TestHelpers:
    def test_free_type_vars(self):
        assert free_type_vars(arrow(TypeVar(0), INT, TypeVar(2))) == {0, 2}

    def test_alpha_equivalent_renaming(self):
        assert alpha_equivalent(
            TypeArrow(TypeVar(0), TypeVar(0)), TypeArrow(TypeVar(7), TypeVar(7))
        )

    def test_alpha_equivalent_rejects_merge(self):
        assert not alpha_equivalent(
            TypeArrow(TypeVar(0), TypeVar(1)), TypeArrow(TypeVar(2), TypeVar(2))
        )

    def test_alpha_equivalent_rejects_split(self):
        assert not alpha_equivalent(
            TypeArrow(TypeVar(0), TypeVar(0)), TypeArrow(TypeVar(1), TypeVar(2))
        )

    def test_alpha_equivalent_constants(self):
        assert not alpha_equivalent(INT, BOOL)
