"""Session: the user-facing object for running parse units.

A session owns one interpreter, so globals declared by one unit are
visible to the next.  Each unit is resolved first; it only runs when
resolution found no static errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TextIO

from treelox.constants import EXIT_OK, EXIT_RUNTIME_ERROR, EXIT_STATIC_ERROR
from treelox.model.program import Program
from treelox.model.statements import Statement
from treelox.resolve import StaticError, resolve

from ._executor import Interpreter
from ._objects import LoxCallable
from ._values import LoxRuntimeError

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of one unit: static errors, or at most one runtime error."""

    static_errors: list[StaticError] = field(default_factory=list)
    runtime_error: LoxRuntimeError | None = None

    @property
    def ok(self) -> bool:
        return not self.static_errors and self.runtime_error is None

    @property
    def exit_code(self) -> int:
        if self.static_errors:
            return EXIT_STATIC_ERROR
        if self.runtime_error is not None:
            return EXIT_RUNTIME_ERROR
        return EXIT_OK

    def diagnostics(self) -> list[str]:
        """One report per error, in the order they were found."""
        reports = [str(error) for error in self.static_errors]
        if self.runtime_error is not None:
            reports.append(self.runtime_error.report())
        return reports


class Session:
    """Runs units against a shared global scope.

    Each unit's resolution table is merged into the interpreter and kept
    for the life of the session, so it grows with every unit run.

    Parameters
    ----------
    out : TextIO
        Stream for ``print`` output (default ``sys.stdout``).
    echo_expressions : bool
        Print the value of top-level expression statements.
    natives : dict[str, LoxCallable]
        Host functions for the global scope (default: ``clock``).
    """

    def __init__(
        self,
        out: TextIO | None = None,
        *,
        echo_expressions: bool = False,
        natives: dict[str, LoxCallable] | None = None,
    ) -> None:
        self.interpreter = Interpreter(
            out,
            echo_expressions=echo_expressions,
            natives=natives,
        )
        self.units_run = 0

    def run(self, unit: Program | list[Statement]) -> RunResult:
        statements = unit.statements if isinstance(unit, Program) else unit

        resolution = resolve(statements)
        if not resolution.ok:
            logger.info("Unit not run: %d static errors", len(resolution.errors))
            return RunResult(static_errors=resolution.errors)

        self.interpreter.resolve(resolution.table)
        error = self.interpreter.interpret(statements)
        self.units_run += 1
        logger.info("Interpreted unit %d (%d statements)", self.units_run, len(statements))
        return RunResult(runtime_error=error)

    @property
    def globals(self):
        """The global environment shared by every unit."""
        return self.interpreter.globals
