"""Syntax-independent unification over TypeVar / TypeArrow / TypeConst."""

from __future__ import annotations

import logging

from .errors import OccursCheckError, TypeMismatch
from .type_system import (
    Substitution,
    Type,
    TypeArrow,
    TypeConst,
    TypeVar,
    free_type_vars,
)

logger = logging.getLogger(__name__)


def occurs(var: TypeVar, t: Type, subs: Substitution) -> bool:
    """True if *var* appears in *t* once existing substitutions are applied."""
    return var.id in free_type_vars(subs.apply(t))


def _bind(var: TypeVar, t: Type, subs: Substitution) -> None:
    if isinstance(t, TypeVar) and t.id == var.id:
        return
    if occurs(var, t, subs):
        raise OccursCheckError(subs.apply(var), subs.apply(t))
    logger.debug("bind %s := %s", var, t)
    subs.bind(var, t)


def unify(t1: Type, t2: Type, subs: Substitution) -> None:
    """Extend *subs* so that *t1* and *t2* become equal, or raise TypeMismatch."""
    left = subs.resolve(t1)
    right = subs.resolve(t2)

    if isinstance(left, TypeVar):
        _bind(left, right, subs)
        return
    if isinstance(right, TypeVar):
        _bind(right, left, subs)
        return

    if isinstance(left, TypeArrow) and isinstance(right, TypeArrow):
        unify(left.from_type, right.from_type, subs)
        unify(left.to_type, right.to_type, subs)
        return

    if isinstance(left, TypeConst) and isinstance(right, TypeConst):
        if left.name == right.name:
            return

    raise TypeMismatch(subs.apply(left), subs.apply(right))
