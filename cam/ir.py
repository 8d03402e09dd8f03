"""Bytecode — CAM instructions and programs."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class Opcode(str, Enum):
    # Value producers
    CONST = "CONST"
    ACCESS = "ACCESS"
    CUR = "CUR"
    # Binding / control flow
    GRAB = "GRAB"
    APPLY = "APPLY"
    RETURN = "RETURN"
    # Arithmetic
    ADD = "ADD"
    MUL = "MUL"


# Opcodes that carry an operand
OPERAND_OPCODES: frozenset[Opcode] = frozenset({Opcode.CONST, Opcode.ACCESS, Opcode.CUR})

BINOP_OPCODES: dict[str, Opcode] = {"+": Opcode.ADD, "*": Opcode.MUL}


class Instruction(BaseModel):
    opcode: Opcode
    operand: Any = None

    model_config = {"frozen": True}

    def __str__(self) -> str:
        if self.opcode in OPERAND_OPCODES:
            return f"{self.opcode.value} {self.operand}"
        return self.opcode.value


Program = list[Instruction]


def const(value: Any) -> Instruction:
    return Instruction(opcode=Opcode.CONST, operand=value)


def access(index: int) -> Instruction:
    return Instruction(opcode=Opcode.ACCESS, operand=index)


def cur(length: int) -> Instruction:
    return Instruction(opcode=Opcode.CUR, operand=length)


GRAB = Instruction(opcode=Opcode.GRAB)
APPLY = Instruction(opcode=Opcode.APPLY)
RETURN = Instruction(opcode=Opcode.RETURN)
ADD = Instruction(opcode=Opcode.ADD)
MUL = Instruction(opcode=Opcode.MUL)
