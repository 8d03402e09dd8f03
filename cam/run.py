"""Orchestrator — run() entry point."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional

from .compiler import compile_term, disassemble
from .machine import execute
from .parser import parse
from .resolver import resolve
from .run_types import MachineConfig, PipelineStats
from .terms import term_size
from .type_system import BOOL, INT, Type, TypeVarGenerator
from .typer import TypeContext, infer

logger = logging.getLogger(__name__)


def context_from_bindings(bindings: Mapping[str, Any]) -> dict[str, Type]:
    """Derive a typing context for integer and boolean bindings.

    Bindings of any other kind get no entry; checking a term that uses them
    needs an explicit context.
    """
    context: dict[str, Type] = {}
    for name, value in bindings.items():
        if isinstance(value, bool):
            context[name] = BOOL
        elif isinstance(value, int):
            context[name] = INT
    return context


def run_pipeline(
    source: str,
    bindings: Optional[Mapping[str, Any]] = None,
    context: Optional[TypeContext] = None,
    config: MachineConfig = MachineConfig(),
) -> tuple[Any, PipelineStats]:
    """End-to-end: parse → (type check) → resolve → compile → execute.

    Args:
        source: Surface-syntax term.
        bindings: Values for free identifiers, bound in insertion order.
        context: Typing context; derived from *bindings* when omitted.
        config: Execution configuration (type checking, step bound, verbosity).

    Returns:
        Tuple of (result value, PipelineStats).
    """
    bindings = dict(bindings or {})
    pipeline_start = time.perf_counter()
    stats = PipelineStats(source_bytes=len(source.encode("utf-8")))

    # 1. Parse
    t0 = time.perf_counter()
    term = parse(source)
    stats.parse_time = time.perf_counter() - t0
    stats.term_size = term_size(term)

    # 2. Type check
    if config.typecheck:
        t0 = time.perf_counter()
        typing_context = context if context is not None else context_from_bindings(bindings)
        inferred = infer(term, typing_context, TypeVarGenerator())
        stats.typecheck_time = time.perf_counter() - t0
        stats.inferred_type = str(inferred)
        if config.verbose:
            print(f"═══ Type ═══\n  {inferred}\n")

    # 3. Resolve
    t0 = time.perf_counter()
    names = list(bindings)
    resolved = resolve(term, names)
    stats.resolve_time = time.perf_counter() - t0

    # 4. Compile
    t0 = time.perf_counter()
    program = compile_term(resolved, depth=len(names))
    stats.compile_time = time.perf_counter() - t0
    stats.instruction_count = len(program)
    logger.info(
        "Compiled %d nodes into %d instructions in %.1fms",
        stats.term_size,
        stats.instruction_count,
        (stats.parse_time + stats.resolve_time + stats.compile_time) * 1000,
    )

    if config.verbose:
        print("═══ Bytecode ═══")
        print(disassemble(program))
        print()

    # 5. Execute
    exec_start = time.perf_counter()
    result, exec_stats = execute(program, bindings.values(), config)
    stats.execution_time = time.perf_counter() - exec_start

    stats.execution_steps = exec_stats.steps
    stats.closures_created = exec_stats.closures_created
    stats.max_dump_depth = exec_stats.max_dump_depth
    stats.total_time = time.perf_counter() - pipeline_start

    if config.verbose:
        print()
        print(stats.report())

    return result, stats


def run(
    source: str,
    bindings: Optional[Mapping[str, Any]] = None,
    context: Optional[TypeContext] = None,
    config: MachineConfig = MachineConfig(),
) -> Any:
    """Evaluate *source* and return its value (an integer, a bound value or a Closure)."""
    result, _ = run_pipeline(source, bindings, context, config)
    return result
