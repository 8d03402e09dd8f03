"""CAM — runtime data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from . import constants

# ── Values ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Closure:
    """Body entry point plus the environment captured at construction time."""

    entry: int
    env: tuple[Any, ...] = ()

    def to_dict(self) -> dict:
        return {
            "closure": self.entry,
            "env": [_serialize_value(v) for v in self.env],
        }

    def __str__(self) -> str:
        return constants.CLOSURE_TAG_TEMPLATE.format(entry=self.entry)


def _serialize_value(v: Any) -> Any:
    if isinstance(v, Closure):
        return v.to_dict()
    return v


def render_value(v: Any) -> str:
    """Scalars render as themselves, closures as an opaque tag."""
    return str(v)


# ── Machine state ────────────────────────────────────────────────


@dataclass(frozen=True)
class Frame:
    """A saved (return point, environment) pair on the dump."""

    return_pc: int
    env: tuple[Any, ...]

    def to_dict(self) -> dict:
        return {
            "return_pc": self.return_pc,
            "env": [_serialize_value(v) for v in self.env],
        }


@dataclass
class MachineState:
    pc: int = 0
    stack: list[Any] = field(default_factory=list)
    env: tuple[Any, ...] = ()
    dump: list[Frame] = field(default_factory=list)
    halted: bool = False
    result: Any = None

    def snapshot(self) -> MachineState:
        """Copy that shares no mutable containers with this state."""
        return MachineState(
            pc=self.pc,
            stack=list(self.stack),
            env=self.env,
            dump=list(self.dump),
            halted=self.halted,
            result=self.result,
        )

    def to_dict(self) -> dict:
        return {
            "pc": self.pc,
            "stack": [_serialize_value(v) for v in self.stack],
            "env": [_serialize_value(v) for v in self.env],
            "dump": [f.to_dict() for f in self.dump],
            "halted": self.halted,
            "result": _serialize_value(self.result),
        }
