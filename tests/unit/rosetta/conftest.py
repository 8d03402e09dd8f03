"""Shared helpers for the cross-stage agreement suite."""

import logging

from cam.compiler import compile_term
from cam.ir import Instruction, Opcode
from cam.ir_stats import max_access_index
from cam.machine import execute
from cam.normalizer import normalize
from cam.parser import parse
from cam.resolver import resolve
from cam.terms import Constant
from cam.type_system import INT
from cam.typer import infer

logger = logging.getLogger(__name__)


def compile_source(source: str) -> list[Instruction]:
    return compile_term(resolve(parse(source)))


def opcodes(program: list[Instruction]) -> set[Opcode]:
    """Return the set of opcodes present in *program*."""
    return {inst.opcode for inst in program}


def assert_stages_agree(source: str, expected: int) -> None:
    """Run the standard assertion battery on one closed integer program.

    1. the term type checks to Int
    2. the compiled program never reads past its binder depth
    3. the machine computes *expected*
    4. the reference normalizer computes the same constant
    """
    term = parse(source)
    assert infer(term) == INT, f"{source} should have type Int"

    program = compile_source(source)
    depth = source.count("lambda")
    assert max_access_index(program) < max(depth, 1)

    result, stats = execute(program)
    logger.info("%s -> %s in %d steps", source, result, stats.steps)
    assert result == expected

    assert normalize(term) == Constant(expected, INT)
