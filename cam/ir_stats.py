"""Pure functions for computing statistics over bytecode programs."""

from __future__ import annotations

from collections import Counter

from cam.ir import Instruction, Opcode


def count_opcodes(program: list[Instruction]) -> dict[str, int]:
    """Return a frequency map of opcode names in the given program.

    Args:
        program: A list of bytecode instructions.

    Returns:
        A dict mapping opcode name strings to their occurrence counts.
        Empty dict for an empty program.
    """
    return dict(Counter(inst.opcode.value for inst in program))


def max_access_index(program: list[Instruction]) -> int:
    """Largest ACCESS operand in *program*, or -1 when it reads no variable."""
    return max(
        (inst.operand for inst in program if inst.opcode == Opcode.ACCESS),
        default=-1,
    )
