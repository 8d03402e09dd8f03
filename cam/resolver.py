"""Scope resolution — annotate every Variable with its de Bruijn index."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import UnboundVariable
from .terms import Application, BinaryOp, Constant, Lambda, Term, Variable

logger = logging.getLogger(__name__)

Scope = Mapping[str, int]  # name -> binder depth at which it was bound


def _extend(scope: Scope, name: str, depth: int) -> Scope:
    return MappingProxyType({**scope, name: depth})


def _resolve(term: Term, depth: int, scope: Scope) -> Term:
    if isinstance(term, Variable):
        if term.name not in scope:
            raise UnboundVariable(term.name)
        return term.with_index(depth - scope[term.name] - 1)

    if isinstance(term, Constant):
        return term

    if isinstance(term, Lambda):
        body = _resolve(term.body, depth + 1, _extend(scope, term.param, depth))
        return Lambda(term.param, body, term.param_type)

    if isinstance(term, Application):
        return Application(
            _resolve(term.function, depth, scope),
            _resolve(term.argument, depth, scope),
        )

    if isinstance(term, BinaryOp):
        return BinaryOp(
            term.operator,
            _resolve(term.left, depth, scope),
            _resolve(term.right, depth, scope),
        )

    raise TypeError(f"Unknown term: {term!r}")


def resolve(term: Term, free_names: Iterable[str] = ()) -> Term:
    """Return a copy of *term* whose variables carry lexical indices.

    *free_names* are bound outside the whole term, in order: the last name is
    the innermost binding.  A repeated name shadows its earlier occurrence.
    """
    names = list(free_names)
    scope: Scope = MappingProxyType({})
    for depth, name in enumerate(names):
        scope = _extend(scope, name, depth)
    resolved = _resolve(term, len(names), scope)
    logger.debug("Resolved %s -> %s", term, resolved)
    return resolved


def free_variables(term: Term) -> frozenset[str]:
    """Names used in *term* without an enclosing binder."""
    if isinstance(term, Variable):
        return frozenset({term.name})
    if isinstance(term, Lambda):
        return free_variables(term.body) - {term.param}
    if isinstance(term, Application):
        return free_variables(term.function) | free_variables(term.argument)
    if isinstance(term, BinaryOp):
        return free_variables(term.left) | free_variables(term.right)
    return frozenset()
