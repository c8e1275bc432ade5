"""Scope frames chained to their enclosing frame."""

from __future__ import annotations

from treelox.model.tokens import Token

from ._values import LoxRuntimeError


class _Unassigned:
    """Marker for a name that is bound but has never held a value."""

    def __repr__(self) -> str:
        return "<unassigned>"


UNASSIGNED = _Unassigned()


class Environment:
    """One level of name -> value bindings.

    Frames are shared: a closure keeps its defining frame alive for as
    long as the closure itself is reachable.
    """

    def __init__(self, enclosing: Environment | None = None) -> None:
        self.enclosing = enclosing
        self.values: dict[str, object] = {}

    def define(self, name: str, value: object) -> None:
        """Bind *name* in this frame, shadowing any outer binding."""
        self.values[name] = value

    def get(self, name: Token) -> object:
        """Look *name* up by walking outward (globals only)."""
        environment: Environment | None = self
        while environment is not None:
            if name.lexeme in environment.values:
                value = environment.values[name.lexeme]
                if value is UNASSIGNED:
                    raise LoxRuntimeError(
                        name,
                        f"Variable '{name.lexeme}' has not been assigned a value before use.",
                    )
                return value
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: object) -> None:
        """Overwrite an existing binding; never declares."""
        environment: Environment | None = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> Environment:
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> object:
        """Read without searching; an unassigned local reads as nil."""
        value = self.ancestor(distance).values.get(name)
        if value is UNASSIGNED:
            return None
        return value

    def assign_at(self, distance: int, name: str, value: object) -> None:
        self.ancestor(distance).values[name] = value

    def depth(self) -> int:
        """Number of enclosing frames above this one."""
        count = 0
        environment = self.enclosing
        while environment is not None:
            count += 1
            environment = environment.enclosing
        return count

    def __repr__(self) -> str:
        return f"Environment({sorted(self.values)}, depth={self.depth()})"
