"""Bytecode compiler — resolved Term → linear CAM program."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .errors import OutOfScope
from .ir import BINOP_OPCODES, Instruction, Opcode, Program
from .terms import Application, BinaryOp, Constant, Lambda, Term, Variable

logger = logging.getLogger(__name__)


class Compiler:
    """Compiles a de Bruijn-resolved term, tracking the binder depth.

    A lambda compiles to ``CUR n`` followed by an ``n``-instruction block
    ``GRAB <body> RETURN``; an application compiles its argument first, then
    its function, then ``APPLY``.
    """

    def __init__(self):
        self._instructions: list[Instruction] = []
        self._DISPATCH: dict[type, Callable[[Any, int], None]] = {
            Variable: self._compile_variable,
            Constant: self._compile_constant,
            Lambda: self._compile_lambda,
            Application: self._compile_application,
            BinaryOp: self._compile_binop,
        }

    def _emit(self, opcode: Opcode, operand: Any = None) -> Instruction:
        inst = Instruction(opcode=opcode, operand=operand)
        self._instructions.append(inst)
        return inst

    def compile(self, term: Term, depth: int = 0) -> Program:
        """Compile *term* under *depth* enclosing binders into a full program."""
        self._instructions = []
        self._compile(term, depth)
        self._emit(Opcode.RETURN)
        logger.info("Compiled %d instructions", len(self._instructions))
        return self._instructions

    def _compile(self, term: Term, depth: int) -> None:
        handler = self._DISPATCH.get(type(term))
        if handler is None:
            raise TypeError(f"Cannot compile {term!r}")
        handler(term, depth)

    def _compile_variable(self, term: Variable, depth: int) -> None:
        if not term.is_resolved or not 0 <= term.index < depth:
            raise OutOfScope(term.name, term.index, depth)
        self._emit(Opcode.ACCESS, term.index)

    def _compile_constant(self, term: Constant, depth: int) -> None:
        self._emit(Opcode.CONST, term.value)

    def _compile_lambda(self, term: Lambda, depth: int) -> None:
        cur = self._emit(Opcode.CUR, 0)
        start = len(self._instructions)
        self._emit(Opcode.GRAB)
        self._compile(term.body, depth + 1)
        self._emit(Opcode.RETURN)
        block_length = len(self._instructions) - start
        self._instructions[start - 1] = cur.model_copy(update={"operand": block_length})

    def _compile_application(self, term: Application, depth: int) -> None:
        self._compile(term.argument, depth)
        self._compile(term.function, depth)
        self._emit(Opcode.APPLY)

    def _compile_binop(self, term: BinaryOp, depth: int) -> None:
        if term.operator not in BINOP_OPCODES:
            raise ValueError(f"Unsupported operator: {term.operator}")
        self._compile(term.left, depth)
        self._compile(term.right, depth)
        self._emit(BINOP_OPCODES[term.operator])


def compile_term(term: Term, depth: int = 0) -> Program:
    """Compile a resolved *term*; *depth* counts bindings already in the environment."""
    return Compiler().compile(term, depth)


def disassemble(program: Program) -> str:
    """Return a numbered mnemonic listing, indenting closure bodies."""
    lines: list[str] = []
    block_ends: list[int] = []
    for pc, inst in enumerate(program):
        while block_ends and pc >= block_ends[-1]:
            block_ends.pop()
        lines.append(f"{pc:>4}  {'  ' * len(block_ends)}{inst}")
        if inst.opcode == Opcode.CUR:
            block_ends.append(pc + 1 + inst.operand)
    return "\n".join(lines)
