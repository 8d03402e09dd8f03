"""Term AST — immutable tagged union built bottom-up by the parser."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from .type_system import Type
from . import constants


@dataclass(frozen=True)
class Variable:
    name: str
    index: int | None = None  # de Bruijn index, set by the resolver

    @property
    def is_resolved(self) -> bool:
        return self.index is not None

    def with_index(self, index: int) -> Variable:
        return replace(self, index=index)

    def __str__(self) -> str:
        if self.index is not None:
            return f"{constants.RESOLVED_VAR_PREFIX}{self.index}"
        return self.name


@dataclass(frozen=True)
class Constant:
    value: Any
    type: Type | None = None

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Lambda:
    param: str
    body: Term
    param_type: Type | None = None

    def __str__(self) -> str:
        annotation = (
            f"{constants.TYPE_ANNOTATION}{self.param_type}" if self.param_type else ""
        )
        return f"({constants.LAMBDA_KEYWORD} {self.param}{annotation}. {self.body})"


@dataclass(frozen=True)
class Application:
    function: Term
    argument: Term

    def __str__(self) -> str:
        return f"({self.function} {self.argument})"


@dataclass(frozen=True)
class BinaryOp:
    operator: str
    left: Term
    right: Term

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


Term = Union[Variable, Constant, Lambda, Application, BinaryOp]


def strip_indices(term: Term) -> Term:
    """Return a copy of *term* with every resolved index removed."""
    if isinstance(term, Variable):
        return Variable(term.name)
    if isinstance(term, Lambda):
        return Lambda(term.param, strip_indices(term.body), term.param_type)
    if isinstance(term, Application):
        return Application(strip_indices(term.function), strip_indices(term.argument))
    if isinstance(term, BinaryOp):
        return BinaryOp(term.operator, strip_indices(term.left), strip_indices(term.right))
    return term


def term_size(term: Term) -> int:
    """Count the nodes in *term*."""
    if isinstance(term, Lambda):
        return 1 + term_size(term.body)
    if isinstance(term, Application):
        return 1 + term_size(term.function) + term_size(term.argument)
    if isinstance(term, BinaryOp):
        return 1 + term_size(term.left) + term_size(term.right)
    return 1
