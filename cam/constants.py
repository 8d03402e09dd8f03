"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

LAMBDA_KEYWORD = "lambda"
LAMBDA_SEPARATOR = "."
TYPE_ANNOTATION = ":"
TYPE_ARROW = "->"

ADD_OPERATOR = "+"
MUL_OPERATOR = "*"
BINARY_OPERATORS: tuple[str, ...] = (ADD_OPERATOR, MUL_OPERATOR)

INT_TYPE_NAME = "Int"
BOOL_TYPE_NAME = "Bool"

TYPE_VAR_PREFIX = "t"
RESOLVED_VAR_PREFIX = "#"
CLOSURE_TAG_TEMPLATE = "<closure@{entry}>"

DEFAULT_NORMALIZE_STEPS = 10_000
