"""Tests for unification with substitution chasing."""

from __future__ import annotations

import pytest

from cam.errors import OccursCheckError, TypeMismatch
from cam.type_system import BOOL, INT, Substitution, TypeArrow, TypeVar
from cam.unifier import unify


class TestUnifySuccess:
    def test_identical_constants(self):
        subs = Substitution()
        unify(INT, INT, subs)
        assert len(subs) == 0

    def test_var_binds_to_const(self):
        subs = Substitution()
        unify(TypeVar(0), BOOL, subs)
        assert subs.apply(TypeVar(0)) == BOOL

    def test_const_binds_var_on_right(self):
        subs = Substitution()
        unify(INT, TypeVar(0), subs)
        assert subs.apply(TypeVar(0)) == INT

    def test_same_var_is_trivial(self):
        subs = Substitution()
        unify(TypeVar(0), TypeVar(0), subs)
        assert len(subs) == 0

    def test_arrows_unify_componentwise(self):
        subs = Substitution()
        unify(TypeArrow(TypeVar(0), INT), TypeArrow(BOOL, TypeVar(1)), subs)
        assert subs.apply(TypeVar(0)) == BOOL
        assert subs.apply(TypeVar(1)) == INT

    def test_existing_bindings_are_chased_first(self):
        subs = Substitution()
        subs.bind(TypeVar(0), INT)
        unify(TypeVar(0), TypeVar(1), subs)
        assert subs.apply(TypeVar(1)) == INT

    def test_transitive_variables(self):
        subs = Substitution()
        unify(TypeVar(0), TypeVar(1), subs)
        unify(TypeVar(1), TypeVar(2), subs)
        unify(TypeVar(2), BOOL, subs)
        assert subs.apply(TypeVar(0)) == BOOL


class TestUnifyFailure:
    def test_distinct_constants(self):
        with pytest.raises(TypeMismatch) as exc_info:
            unify(INT, BOOL, Substitution())
        assert exc_info.value.left == INT
        assert exc_info.value.right == BOOL
        assert "Int" in str(exc_info.value) and "Bool" in str(exc_info.value)

    def test_const_against_arrow(self):
        with pytest.raises(TypeMismatch):
            unify(INT, TypeArrow(INT, INT), Substitution())

    def test_mismatch_reports_substituted_types(self):
        subs = Substitution()
        subs.bind(TypeVar(0), INT)
        with pytest.raises(TypeMismatch) as exc_info:
            unify(TypeArrow(TypeVar(0), INT), TypeArrow(BOOL, INT), subs)
        assert exc_info.value.left == INT
        assert exc_info.value.right == BOOL

    def test_occurs_check(self):
        with pytest.raises(OccursCheckError):
            unify(TypeVar(0), TypeArrow(TypeVar(0), INT), Substitution())

    def test_occurs_check_through_substitution(self):
        subs = Substitution()
        subs.bind(TypeVar(1), TypeArrow(TypeVar(0), INT))
        with pytest.raises(OccursCheckError):
            unify(TypeVar(0), TypeVar(1), subs)
