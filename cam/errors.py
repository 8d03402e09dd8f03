"""Error hierarchy for every stage of the pipeline.

Each stage raises a discriminated subclass of :class:`CamError` and aborts
the current compile-or-run unit immediately.  Callers decide whether to go on
with the next independent input.
"""

from __future__ import annotations


class CamError(Exception):
    """Root of all pipeline errors."""


class ParseError(CamError, SyntaxError):
    """Surface text does not match the grammar."""

    def __init__(self, message: str, text: str = "", position: int = 0, expected: str = ""):
        line = text.count("\n", 0, position) + 1
        column = position - (text.rfind("\n", 0, position) + 1) + 1
        detail = f"{message} at {line}:{column}"
        if expected:
            detail = f"{detail} (expected {expected})"
        super().__init__(detail)
        self.text = text
        self.position = position
        self.expected = expected
        self.line = line
        self.column = column
        self.msg = detail
        self.lineno = self.line
        self.offset = self.column

    def __str__(self) -> str:
        return self.msg


class UnboundVariable(CamError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound variable: {name}")


class OutOfScope(CamError):
    """A compiled ACCESS index would reach outside the enclosing binders."""

    def __init__(self, name: str, index: int | None, depth: int):
        self.name = name
        self.index = index
        self.depth = depth
        super().__init__(
            f"Variable '{name}' with index {index} is out of scope at binder depth {depth}"
        )


class TypeMismatch(CamError):
    def __init__(self, left, right, message: str = ""):
        self.left = left
        self.right = right
        super().__init__(message or f"Cannot unify {left} with {right}")


class OccursCheckError(TypeMismatch):
    """Binding a variable would build an infinite type."""

    def __init__(self, var, other):
        super().__init__(var, other, f"Occurs check failed: {var} occurs in {other}")


class ApplicationTypeMismatch(TypeMismatch):
    """A mismatch raised while checking an application, with both operand types."""

    def __init__(self, cause: TypeMismatch, function_type, argument_type):
        self.cause = cause
        self.function_type = function_type
        self.argument_type = argument_type
        super().__init__(
            cause.left,
            cause.right,
            f"{cause} (applying function of type {function_type} "
            f"to argument of type {argument_type})",
        )


class MachineError(CamError):
    """The abstract machine reached an invalid state."""


class VariableAccessError(MachineError):
    def __init__(self, index: int, env_size: int):
        self.index = index
        self.env_size = env_size
        super().__init__(
            f"ACCESS {index} outside environment of size {env_size}"
        )


class StackUnderflow(MachineError):
    def __init__(self, opcode: str):
        self.opcode = opcode
        super().__init__(f"Stack underflow in {opcode}")


class NotCallable(MachineError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Value is not callable: {value!r}")


class ArithmeticTypeError(MachineError):
    def __init__(self, opcode: str, left, right):
        self.opcode = opcode
        self.left = left
        self.right = right
        super().__init__(f"{opcode} expects two integers, got {left!r} and {right!r}")


class StepLimitExceeded(MachineError):
    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        super().__init__(f"Execution exceeded {max_steps} steps")
