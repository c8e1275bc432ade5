"""treelox interpret: evaluation of resolved syntax trees.

Entry point::

    from treelox.interpret import run

    result = run(program)
    if not result.ok:
        for line in result.diagnostics():
            print(line, file=sys.stderr)

For several units sharing one global scope (an interactive prompt, for
instance) use a ``Session`` directly.
"""

from __future__ import annotations

from typing import TextIO

from treelox.model.program import Program
from treelox.model.statements import Statement

from ._environment import UNASSIGNED, Environment
from ._executor import Interpreter, ReturnSignal
from ._objects import LoxCallable, LoxClass, LoxFunction, LoxInstance, NativeFunction
from ._session import RunResult, Session
from ._values import (
    InterpreterError,
    LoxRuntimeError,
    is_equal,
    is_truthy,
    stringify,
)


def run(
    unit: Program | list[Statement],
    *,
    out: TextIO | None = None,
    echo_expressions: bool = False,
) -> RunResult:
    """Resolve and interpret a single unit in a fresh session."""
    return Session(out, echo_expressions=echo_expressions).run(unit)


__all__ = [
    "Environment",
    "Interpreter",
    "InterpreterError",
    "LoxCallable",
    "LoxClass",
    "LoxFunction",
    "LoxInstance",
    "LoxRuntimeError",
    "NativeFunction",
    "ReturnSignal",
    "RunResult",
    "Session",
    "UNASSIGNED",
    "is_equal",
    "is_truthy",
    "run",
    "stringify",
]
