"""Lambda-calculus compiler and Categorical Abstract Machine package."""

from .run import run  # noqa: F401
from .api import (  # noqa: F401
    parse_source,
    resolve_source,
    infer_source,
    compile_source,
    dump_bytecode,
    evaluate,
    trace_source,
)
