"""Categorical Abstract Machine — executes compiled bytecode.

The machine state is an operand stack, an environment (index 0 is the most
recently bound value) and a dump of saved (return point, environment)
frames.  Every structure is an explicit heap-allocated container, so deep
call chains never consume host call-stack depth.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .errors import (
    ArithmeticTypeError,
    MachineError,
    NotCallable,
    StackUnderflow,
    StepLimitExceeded,
    VariableAccessError,
)
from .ir import Instruction, Opcode, Program
from .machine_types import Closure, Frame, MachineState
from .run_types import ExecutionStats, MachineConfig
from .trace_types import ExecutionTrace, TraceStep

logger = logging.getLogger(__name__)


def initial_environment(bindings: Iterable[Any]) -> tuple[Any, ...]:
    """Seed an environment from values bound in order, last one innermost."""
    return tuple(reversed(list(bindings)))


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Machine:
    """Single-threaded CAM interpreter over one program."""

    def __init__(self, program: Program, bindings: Iterable[Any] = ()):
        self.program = list(program)
        self.state = MachineState(env=initial_environment(bindings))
        self.stats = ExecutionStats()
        self._DISPATCH: dict[Opcode, Callable[[Instruction], None]] = {
            Opcode.CONST: self._const,
            Opcode.ACCESS: self._access,
            Opcode.CUR: self._cur,
            Opcode.GRAB: self._grab,
            Opcode.APPLY: self._apply,
            Opcode.RETURN: self._return,
            Opcode.ADD: self._arith,
            Opcode.MUL: self._arith,
        }

    # ── stack helpers ────────────────────────────────────────────

    def _push(self, value: Any) -> None:
        self.state.stack.append(value)
        self.stats.max_stack_depth = max(
            self.stats.max_stack_depth, len(self.state.stack)
        )

    def _pop(self, opcode: Opcode) -> Any:
        if not self.state.stack:
            raise StackUnderflow(opcode.value)
        return self.state.stack.pop()

    # ── transitions ──────────────────────────────────────────────

    def _const(self, inst: Instruction) -> None:
        self._push(inst.operand)
        self.state.pc += 1

    def _access(self, inst: Instruction) -> None:
        index = inst.operand
        env = self.state.env
        if not _is_integer(index) or not 0 <= index < len(env):
            raise VariableAccessError(index, len(env))
        self._push(env[index])
        self.state.pc += 1

    def _cur(self, inst: Instruction) -> None:
        length = inst.operand
        end = self.state.pc + 1 + length
        if not _is_integer(length) or length < 1 or end > len(self.program):
            raise MachineError(
                f"CUR at {self.state.pc} declares a block of {length} instructions "
                f"outside the program"
            )
        self._push(Closure(entry=self.state.pc + 1, env=self.state.env))
        self.stats.closures_created += 1
        self.state.pc = end

    def _grab(self, inst: Instruction) -> None:
        value = self._pop(inst.opcode)
        self.state.env = (value,) + self.state.env
        self.state.pc += 1

    def _apply(self, inst: Instruction) -> None:
        if len(self.state.stack) < 2:
            raise StackUnderflow(inst.opcode.value)
        # function code runs after argument code, so the callable is on top
        function = self.state.stack.pop()
        argument = self.state.stack.pop()
        if not isinstance(function, Closure):
            raise NotCallable(function)
        self.state.dump.append(Frame(return_pc=self.state.pc + 1, env=self.state.env))
        self.stats.applications += 1
        self.stats.max_dump_depth = max(
            self.stats.max_dump_depth, len(self.state.dump)
        )
        # the closure body starts with GRAB, which binds the argument
        self.state.env = function.env
        self._push(argument)
        self.state.pc = function.entry

    def _return(self, inst: Instruction) -> None:
        result = self._pop(inst.opcode)
        if self.state.dump:
            frame = self.state.dump.pop()
            self.state.env = frame.env
            self.state.pc = frame.return_pc
            self._push(result)
            return
        self._halt(result)

    def _arith(self, inst: Instruction) -> None:
        if len(self.state.stack) < 2:
            raise StackUnderflow(inst.opcode.value)
        right = self.state.stack.pop()
        left = self.state.stack.pop()
        if not (_is_integer(left) and _is_integer(right)):
            raise ArithmeticTypeError(inst.opcode.value, left, right)
        self._push(left + right if inst.opcode == Opcode.ADD else left * right)
        self.state.pc += 1

    def _halt(self, result: Any) -> None:
        if self.state.stack:
            raise MachineError(
                f"Halted with {len(self.state.stack)} extra values on the stack"
            )
        self.state.halted = True
        self.state.result = result

    # ── driver ───────────────────────────────────────────────────

    def step(self) -> Instruction | None:
        """Execute one transition; return the instruction, or None at end of code."""
        pc = self.state.pc
        if pc >= len(self.program):
            if self.state.dump or len(self.state.stack) != 1:
                raise MachineError(
                    f"Ran off the end of the program with {len(self.state.stack)} "
                    f"stack values and {len(self.state.dump)} dump frames"
                )
            self._halt(self.state.stack.pop())
            return None
        inst = self.program[pc]
        handler = self._DISPATCH.get(inst.opcode)
        if handler is None:
            raise MachineError(f"Unknown opcode: {inst.opcode}")
        handler(inst)
        self.stats.steps += 1
        return inst

    def run(
        self,
        config: MachineConfig = MachineConfig(),
        on_step: Callable[[int, Instruction], None] | None = None,
    ) -> Any:
        while not self.state.halted:
            # the end-of-code halt costs no step
            at_end = self.state.pc >= len(self.program)
            if (
                not at_end
                and config.max_steps is not None
                and self.stats.steps >= config.max_steps
            ):
                raise StepLimitExceeded(config.max_steps)
            pc = self.state.pc
            inst = self.step()
            if inst is None:
                break
            if config.verbose:
                print(
                    f"[step {self.stats.steps - 1}] {pc:>4}  {inst}"
                    f"  stack={len(self.state.stack)} dump={len(self.state.dump)}"
                )
            if on_step is not None:
                on_step(pc, inst)
        logger.info(
            "Halted after %d steps (%d closures, max dump depth %d)",
            self.stats.steps,
            self.stats.closures_created,
            self.stats.max_dump_depth,
        )
        return self.state.result


def execute(
    program: Program,
    bindings: Iterable[Any] = (),
    config: MachineConfig = MachineConfig(),
) -> tuple[Any, ExecutionStats]:
    """Run *program* to completion and return (result, ExecutionStats).

    Args:
        program: Compiled bytecode.
        bindings: Values for the declared free identifiers, in binding order.
        config: Execution configuration (optional step bound, verbosity).
    """
    machine = Machine(program, bindings)
    result = machine.run(config)
    return result, machine.stats


def execute_traced(
    program: Program,
    bindings: Iterable[Any] = (),
    config: MachineConfig = MachineConfig(),
) -> ExecutionTrace:
    """Identical to execute() but snapshots the machine state after each step."""
    machine = Machine(program, bindings)
    initial_state = machine.state.snapshot()
    steps: list[TraceStep] = []

    def record(pc: int, inst: Instruction) -> None:
        steps.append(
            TraceStep(
                step_index=len(steps),
                pc=pc,
                instruction=inst,
                state=machine.state.snapshot(),
            )
        )

    result = machine.run(config, on_step=record)
    return ExecutionTrace(
        steps=steps,
        stats=machine.stats,
        initial_state=initial_state,
        result=result,
    )
