"""Top-level parse unit."""

from __future__ import annotations

from pydantic import BaseModel

from .statements import Statement


class Program(BaseModel):
    """One parse unit: the statements handed over by the parser."""

    statements: list[Statement] = []
