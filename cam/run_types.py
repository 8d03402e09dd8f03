"""Run pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MachineConfig:
    """Groups pipeline and machine execution configuration."""

    max_steps: int | None = None  # optional fuel bound; None runs to completion
    typecheck: bool = False
    verbose: bool = False


@dataclass
class ExecutionStats:
    """Returned execution metrics from execute()."""

    steps: int = 0
    closures_created: int = 0
    applications: int = 0
    max_stack_depth: int = 0
    max_dump_depth: int = 0


@dataclass
class PipelineStats:
    """Timing and size statistics for each pipeline stage."""

    source_bytes: int = 0
    term_size: int = 0
    inferred_type: str = ""

    # Stage timings (seconds)
    parse_time: float = 0.0
    typecheck_time: float = 0.0
    resolve_time: float = 0.0
    compile_time: float = 0.0
    execution_time: float = 0.0
    total_time: float = 0.0

    # Output sizes
    instruction_count: int = 0

    # Execution stats
    execution_steps: int = 0
    closures_created: int = 0
    max_dump_depth: int = 0

    def report(self) -> str:
        lines = [
            "═══ Pipeline Statistics ═══",
            f"  Source: {self.source_bytes} bytes, {self.term_size} term nodes",
            "",
            f"  {'Stage':<20} {'Time':>10}  {'Output':>30}",
            f"  {'─' * 20} {'─' * 10}  {'─' * 30}",
        ]

        stages = [
            ("Parse", self.parse_time, f"{self.term_size} nodes"),
            ("Type check", self.typecheck_time, self.inferred_type),
            ("Resolve", self.resolve_time, ""),
            ("Compile", self.compile_time, f"{self.instruction_count} instructions"),
            (
                "Execute (CAM)",
                self.execution_time,
                f"{self.execution_steps} steps",
            ),
        ]
        for name, t, output in stages:
            time_str = f"{t * 1000:>8.1f}ms"
            lines.append(f"  {name:<20} {time_str:>10}  {output:>30}")

        lines.append(f"  {'─' * 20} {'─' * 10}  {'─' * 30}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        lines.append("")
        lines.append(
            f"  Final state: {self.closures_created} closures created,"
            f" max dump depth {self.max_dump_depth}"
        )
        return "\n".join(lines)
