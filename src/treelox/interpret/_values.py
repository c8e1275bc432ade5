"""Value system for the evaluator.

Runtime values are plain Python objects: ``None`` is nil, ``bool`` and
``float`` are booleans and numbers, ``str`` is a string, and callables
and instances are the classes in ``_objects``.  This module holds the
rules that every operator shares (truthiness, equality, printing) and
the runtime error type.
"""

from __future__ import annotations

import math

from treelox.constants import NIL_TEXT
from treelox.model.tokens import Token


class LoxRuntimeError(Exception):
    """Runtime error raised while evaluating a unit.

    Carries the offending token so the driver can report its line.
    """

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> int:
        return self.token.line

    def report(self) -> str:
        return f"{self.message}\n[line {self.token.line}]"


class InterpreterError(Exception):
    """Internal defect: a node kind the evaluator has no handler for."""


# ---------------------------------------------------------------------------
# Truthiness and equality
# ---------------------------------------------------------------------------

def is_truthy(value: object) -> bool:
    """nil and false are falsey; everything else (0 and "" included) is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: object, right: object) -> bool:
    """Language equality: never raises, never converts.

    Numbers, strings and booleans compare by value; functions, classes
    and instances by identity.
    """
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    # Python treats True == 1.0; the language does not.
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, float) and isinstance(right, float):
        return _same_number(left, right)
    return left == right


def _same_number(left: float, right: float) -> bool:
    """Bitwise-style number equality: NaN equals NaN, 0 differs from -0."""
    if math.isnan(left) or math.isnan(right):
        return math.isnan(left) and math.isnan(right)
    return left == right and math.copysign(1.0, left) == math.copysign(1.0, right)


# ---------------------------------------------------------------------------
# Printing
# ---------------------------------------------------------------------------

def stringify(value: object) -> str:
    if value is None:
        return NIL_TEXT
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = str(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)
