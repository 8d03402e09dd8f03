"""Composable API functions for the CAM pipeline stages.

Each function corresponds to a CLI workflow (--bytecode-only, --type,
--trace) but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from .compiler import compile_term, disassemble
from .ir import Program
from .ir_stats import count_opcodes
from .machine import execute_traced
from .parser import parse
from .resolver import resolve
from .run import context_from_bindings, run_pipeline
from .run_types import MachineConfig, PipelineStats
from .terms import Term
from .trace_types import ExecutionTrace
from .type_system import Type, TypeVarGenerator
from .typer import TypeContext, infer

logger = logging.getLogger(__name__)


def parse_source(source: str) -> Term:
    """Parse surface text into an (unresolved) Term."""
    return parse(source)


def resolve_source(source: str, free_names: Iterable[str] = ()) -> Term:
    """Parse and resolve *source*; *free_names* are bound outside the term."""
    return resolve(parse(source), free_names)


def infer_source(
    source: str,
    context: Optional[TypeContext] = None,
    generator: Optional[TypeVarGenerator] = None,
) -> Type:
    """Parse *source* and infer its type under *context*.

    Args:
        source: The surface-syntax term.
        context: Mapping from free identifier to its type.
        generator: Fresh-variable source; a new one is used when omitted.

    Returns:
        The fully substituted type.
    """
    return infer(parse(source), context, generator)


def compile_source(source: str, free_names: Iterable[str] = ()) -> Program:
    """Parse, resolve and compile *source* into bytecode."""
    names = list(free_names)
    logger.info("Compiling source with %d free names", len(names))
    return compile_term(resolve(parse(source), names), depth=len(names))


def dump_bytecode(source: str, free_names: Iterable[str] = ()) -> str:
    """Compile *source* and return a human-readable disassembly."""
    return disassemble(compile_source(source, free_names))


def bytecode_stats(source: str, free_names: Iterable[str] = ()) -> dict[str, int]:
    """Compile *source* and return an opcode frequency map."""
    return count_opcodes(compile_source(source, free_names))


def evaluate(
    source: str,
    bindings: Optional[Mapping[str, Any]] = None,
    typecheck: bool = False,
    max_steps: Optional[int] = None,
) -> Any:
    """Evaluate *source* with optional type checking and step bound."""
    config = MachineConfig(max_steps=max_steps, typecheck=typecheck)
    result, _ = run_pipeline(source, bindings, config=config)
    return result


def trace_source(
    source: str,
    bindings: Optional[Mapping[str, Any]] = None,
    max_steps: Optional[int] = None,
) -> ExecutionTrace:
    """Compile *source* and execute it, recording every machine transition."""
    bindings = dict(bindings or {})
    program = compile_source(source, bindings)
    return execute_traced(
        program, bindings.values(), MachineConfig(max_steps=max_steps)
    )


def pipeline_stats(
    source: str,
    bindings: Optional[Mapping[str, Any]] = None,
    typecheck: bool = True,
) -> PipelineStats:
    """Run the full pipeline and return its per-stage statistics."""
    bindings = dict(bindings or {})
    config = MachineConfig(typecheck=typecheck)
    _, stats = run_pipeline(
        source, bindings, context_from_bindings(bindings), config
    )
    return stats
