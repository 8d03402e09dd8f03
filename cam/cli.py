"""Command-line front end for the CAM pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .api import dump_bytecode, infer_source, trace_source
from .errors import CamError
from .machine_types import render_value
from .run import context_from_bindings, run_pipeline
from .run_types import MachineConfig

logger = logging.getLogger(__name__)

DEMO_SOURCE = "((lambda x. ((lambda y. (x + y)) 10)) 32)"


def _parse_binding(text: str) -> tuple[str, int]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=int, got {text!r}")
    try:
        return name.strip(), int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"binding value must be an integer: {text!r}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cam", description="Categorical Abstract Machine for lambda terms"
    )
    parser.add_argument("file", nargs="?", help="Source file containing one term")
    parser.add_argument("--expr", "-e", default=None, help="Evaluate this term")
    parser.add_argument(
        "--bind",
        "-b",
        action="append",
        type=_parse_binding,
        default=[],
        metavar="NAME=INT",
        help="Bind a free identifier to an integer (repeatable)",
    )
    parser.add_argument(
        "--max-steps",
        "-n",
        type=int,
        default=None,
        help="Abort after this many machine steps (default: unbounded)",
    )
    parser.add_argument(
        "--type", action="store_true", help="Type check before running"
    )
    parser.add_argument(
        "--bytecode-only", action="store_true", help="Only print the bytecode"
    )
    parser.add_argument(
        "--trace", action="store_true", help="Print every machine transition"
    )
    parser.add_argument(
        "--stats", action="store_true", help="Print pipeline statistics (with --trace, every state) as JSON"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.expr is not None:
        source = args.expr
    elif args.file:
        with open(args.file) as f:
            source = f.read()
    else:
        source = DEMO_SOURCE
        print(f"No term provided. Using built-in demo: {source}\n")

    bindings = dict(args.bind)

    try:
        if args.bytecode_only:
            print("═══ Bytecode ═══")
            print(dump_bytecode(source, bindings))
            return 0

        if args.type:
            print(f"Type: {infer_source(source, context_from_bindings(bindings))}")

        if args.trace:
            trace = trace_source(source, bindings, args.max_steps)
            print("═══ Trace ═══")
            for step in trace.steps:
                print(step)
            if args.stats:
                print(json.dumps([step.to_dict() for step in trace.steps], indent=2))
            print(f"\nResult: {render_value(trace.result)}")
            return 0

        config = MachineConfig(max_steps=args.max_steps)
        result, stats = run_pipeline(source, bindings, config=config)
    except CamError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Result: {render_value(result)}")
    if args.stats:
        print(json.dumps(vars(stats), indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
