"""Trace data types for step-by-step execution replay."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .ir import Instruction
from .machine_types import MachineState
from .run_types import ExecutionStats


@dataclass(frozen=True)
class TraceStep:
    """A single step in the execution trace.

    Captures the instruction executed and a snapshot of the machine state
    after the transition was applied.
    """

    step_index: int
    pc: int
    instruction: Instruction
    state: MachineState

    def __str__(self) -> str:
        stack_top = self.state.stack[-1] if self.state.stack else "-"
        return (
            f"[step {self.step_index}] {self.pc:>4}  {str(self.instruction):<12}"
            f" top={stack_top}  env={len(self.state.env)}"
            f"  dump={len(self.state.dump)}"
        )

    def to_dict(self) -> dict:
        return {
            "step": self.step_index,
            "pc": self.pc,
            "instruction": str(self.instruction),
            "state": self.state.to_dict(),
        }


@dataclass(frozen=True)
class ExecutionTrace:
    """Complete trace of an execution run.

    Contains the initial MachineState (before any instruction) and a list of
    TraceStep snapshots for each instruction that was actually executed.
    """

    steps: list[TraceStep] = field(default_factory=list)
    stats: ExecutionStats = field(default_factory=ExecutionStats)
    initial_state: Any = None  # MachineState before any instruction
    result: Any = None
