"""Reference evaluator — small-step beta reduction over named terms.

Used as an oracle for the compiled pipeline.  Reduction is leftmost
outermost and substitution renames binders to avoid capturing free
variables of the substituted value.
"""

from __future__ import annotations

import itertools
import logging

from .errors import StepLimitExceeded
from .terms import Application, BinaryOp, Constant, Lambda, Term, Variable
from .resolver import free_variables
from . import constants

logger = logging.getLogger(__name__)

_ARITHMETIC = {
    constants.ADD_OPERATOR: lambda a, b: a + b,
    constants.MUL_OPERATOR: lambda a, b: a * b,
}


def _fresh_name(base: str, avoid: frozenset[str]) -> str:
    for n in itertools.count(1):
        candidate = f"{base}_{n}"
        if candidate not in avoid:
            return candidate


def substitute(term: Term, name: str, value: Term) -> Term:
    """Replace free occurrences of *name* in *term* with *value*."""
    if isinstance(term, Variable):
        return value if term.name == name else term

    if isinstance(term, Lambda):
        if term.param == name:
            return term
        value_free = free_variables(value)
        if term.param in value_free and name in free_variables(term.body):
            renamed = _fresh_name(
                term.param, value_free | free_variables(term.body) | {name}
            )
            body = substitute(term.body, term.param, Variable(renamed))
            return Lambda(renamed, substitute(body, name, value), term.param_type)
        return Lambda(term.param, substitute(term.body, name, value), term.param_type)

    if isinstance(term, Application):
        return Application(
            substitute(term.function, name, value),
            substitute(term.argument, name, value),
        )

    if isinstance(term, BinaryOp):
        return BinaryOp(
            term.operator,
            substitute(term.left, name, value),
            substitute(term.right, name, value),
        )

    return term


def _is_int_constant(term: Term) -> bool:
    return (
        isinstance(term, Constant)
        and isinstance(term.value, int)
        and not isinstance(term.value, bool)
    )


def reduce(term: Term) -> tuple[Term, bool]:
    """Perform one reduction step; return (term, whether anything changed)."""
    if isinstance(term, Application):
        function, reduced = reduce(term.function)
        if reduced:
            return Application(function, term.argument), True
        if isinstance(function, Lambda):
            return substitute(function.body, function.param, term.argument), True
        argument, reduced = reduce(term.argument)
        if reduced:
            return Application(term.function, argument), True
        return term, False

    if isinstance(term, BinaryOp):
        left, reduced = reduce(term.left)
        if reduced:
            return BinaryOp(term.operator, left, term.right), True
        right, reduced = reduce(term.right)
        if reduced:
            return BinaryOp(term.operator, term.left, right), True
        if _is_int_constant(term.left) and _is_int_constant(term.right):
            value = _ARITHMETIC[term.operator](term.left.value, term.right.value)
            return Constant(value, term.left.type), True
        return term, False

    if isinstance(term, Lambda):
        body, reduced = reduce(term.body)
        if reduced:
            return Lambda(term.param, body, term.param_type), True

    return term, False


def normalize(term: Term, max_steps: int = constants.DEFAULT_NORMALIZE_STEPS) -> Term:
    """Reduce *term* until no redex remains or *max_steps* is exhausted."""
    current = term
    for step in range(max_steps):
        current, reduced = reduce(current)
        if not reduced:
            logger.debug("Normal form after %d steps: %s", step, current)
            return current
    if not reduce(current)[1]:
        return current
    raise StepLimitExceeded(max_steps)
