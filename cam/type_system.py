"""Type expressions, fresh type-variable generation and substitutions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from . import constants


@dataclass(frozen=True)
class TypeVar:
    id: int

    def __str__(self) -> str:
        return f"'{constants.TYPE_VAR_PREFIX}{self.id}"


@dataclass(frozen=True)
class TypeArrow:
    from_type: Type
    to_type: Type

    def __str__(self) -> str:
        return render_type(self)


@dataclass(frozen=True)
class TypeConst:
    name: str

    def __str__(self) -> str:
        return self.name


Type = Union[TypeVar, TypeArrow, TypeConst]

INT = TypeConst(constants.INT_TYPE_NAME)
BOOL = TypeConst(constants.BOOL_TYPE_NAME)


def render_type(t: Type, nested: bool = False) -> str:
    """Render *t*; arrows are right associative so only a left arrow is parenthesised."""
    if isinstance(t, TypeArrow):
        text = f"{render_type(t.from_type, nested=True)} -> {render_type(t.to_type)}"
        return f"({text})" if nested else text
    return str(t)


def arrow(*types: Type) -> Type:
    """Build a right-nested arrow: ``arrow(A, B, C)`` is ``A -> (B -> C)``."""
    if not types:
        raise ValueError("arrow() needs at least one type")
    if len(types) == 1:
        return types[0]
    return TypeArrow(types[0], arrow(*types[1:]))


class TypeVarGenerator:
    """Monotonic source of fresh type variables, owned by one inference run."""

    def __init__(self, start: int = 0):
        self._start = start
        self._counter = start

    def fresh(self) -> TypeVar:
        var = TypeVar(self._counter)
        self._counter += 1
        return var

    def reset(self) -> None:
        self._counter = self._start

    def avoid(self, types: Iterable[Type]) -> None:
        """Advance past every variable id already used in *types*."""
        for t in types:
            for var_id in free_type_vars(t):
                self._counter = max(self._counter, var_id + 1)

    @property
    def issued(self) -> int:
        return self._counter - self._start


@dataclass
class Substitution:
    """Mapping from TypeVar id to Type, extended incrementally by the unifier."""

    bindings: dict[int, Type] = field(default_factory=dict)

    def __contains__(self, var: TypeVar) -> bool:
        return var.id in self.bindings

    def __len__(self) -> int:
        return len(self.bindings)

    def bind(self, var: TypeVar, t: Type) -> None:
        self.bindings[var.id] = t

    def resolve(self, t: Type) -> Type:
        """Chase *t* until it is an unbound variable or a structural type."""
        while isinstance(t, TypeVar) and t.id in self.bindings:
            t = self.bindings[t.id]
        return t

    def apply(self, t: Type) -> Type:
        """Rewrite *t* completely, substituting inside arrows as well."""
        t = self.resolve(t)
        if isinstance(t, TypeArrow):
            return TypeArrow(self.apply(t.from_type), self.apply(t.to_type))
        return t


def free_type_vars(t: Type) -> frozenset[int]:
    if isinstance(t, TypeVar):
        return frozenset({t.id})
    if isinstance(t, TypeArrow):
        return free_type_vars(t.from_type) | free_type_vars(t.to_type)
    return frozenset()


def alpha_equivalent(t1: Type, t2: Type) -> bool:
    """True when *t1* and *t2* are equal up to a consistent renaming of variables."""
    forward: dict[int, int] = {}
    backward: dict[int, int] = {}

    def walk(a: Type, b: Type) -> bool:
        if isinstance(a, TypeVar) and isinstance(b, TypeVar):
            if forward.setdefault(a.id, b.id) != b.id:
                return False
            return backward.setdefault(b.id, a.id) == a.id
        if isinstance(a, TypeArrow) and isinstance(b, TypeArrow):
            return walk(a.from_type, b.from_type) and walk(a.to_type, b.to_type)
        if isinstance(a, TypeConst) and isinstance(b, TypeConst):
            return a.name == b.name
        return False

    return walk(t1, t2)
