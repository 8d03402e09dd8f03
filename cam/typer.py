"""Syntax-directed, monomorphic type inference."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .errors import ApplicationTypeMismatch, TypeMismatch, UnboundVariable
from .terms import Application, BinaryOp, Constant, Lambda, Term, Variable
from .type_system import INT, Substitution, Type, TypeArrow, TypeVarGenerator
from .unifier import unify

logger = logging.getLogger(__name__)

TypeContext = Mapping[str, Type]


class TypeChecker:
    """Owns the fresh-variable generator and the substitution for one run.

    ``check`` may be called repeatedly; every call starts from an empty
    substitution and a reset generator, so results are reproducible.
    Fresh variables start above any variable id found in the context.
    """

    def __init__(self, generator: Optional[TypeVarGenerator] = None):
        self.generator = generator or TypeVarGenerator()
        self.substitution = Substitution()

    def check(self, term: Term, context: Optional[TypeContext] = None) -> Type:
        self.generator.reset()
        self.generator.avoid((context or {}).values())
        self.substitution = Substitution()
        inferred = self._infer(term, dict(context or {}))
        result = self.substitution.apply(inferred)
        logger.info("Inferred %s : %s", term, result)
        return result

    def _infer(self, term: Term, context: dict[str, Type]) -> Type:
        if isinstance(term, Constant):
            return term.type if term.type is not None else self.generator.fresh()

        if isinstance(term, Variable):
            if term.name not in context:
                raise UnboundVariable(term.name)
            return context[term.name]

        if isinstance(term, Lambda):
            param_type = (
                term.param_type
                if term.param_type is not None
                else self.generator.fresh()
            )
            body_type = self._infer(term.body, {**context, term.param: param_type})
            return TypeArrow(param_type, body_type)

        if isinstance(term, Application):
            function_type = self._infer(term.function, context)
            argument_type = self._infer(term.argument, context)
            result_type = self.generator.fresh()
            try:
                unify(
                    function_type,
                    TypeArrow(argument_type, result_type),
                    self.substitution,
                )
            except TypeMismatch as exc:
                raise ApplicationTypeMismatch(
                    exc,
                    self.substitution.apply(function_type),
                    self.substitution.apply(argument_type),
                ) from exc
            return self.substitution.apply(result_type)

        if isinstance(term, BinaryOp):
            unify(self._infer(term.left, context), INT, self.substitution)
            unify(self._infer(term.right, context), INT, self.substitution)
            return INT

        raise TypeError(f"Unknown term: {term!r}")


def infer(
    term: Term,
    context: Optional[TypeContext] = None,
    generator: Optional[TypeVarGenerator] = None,
) -> Type:
    """Infer the type of *term* under *context*."""
    return TypeChecker(generator).check(term, context)
