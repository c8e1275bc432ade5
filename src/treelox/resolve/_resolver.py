"""Static resolution pass.

Walks a parse unit once, before execution, and computes how many scopes
separate every local variable reference from its declaration.  Scoping
rule violations are collected rather than raised so that every static
error in a unit is reported together.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from treelox.constants import INITIALIZER_NAME, SUPER_NAME, THIS_NAME
from treelox.model.expressions import (
    AssignExpr,
    BinaryExpr,
    CallExpr,
    Expression,
    GetExpr,
    GroupingExpr,
    LogicalExpr,
    SetExpr,
    SuperExpr,
    ThisExpr,
    UnaryExpr,
    VariableExpr,
)
from treelox.model.statements import (
    BlockStatement,
    ClassStatement,
    ExpressionStatement,
    FunctionStatement,
    IfStatement,
    PrintStatement,
    ReturnStatement,
    Statement,
    VarStatement,
    WhileStatement,
)
from treelox.model.tokens import Token, TokenType

from ._table import ResolutionTable

logger = logging.getLogger(__name__)


class FunctionType(str, Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"


class ClassType(str, Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"


@dataclass(frozen=True)
class StaticError:
    """A scoping rule violation found before execution."""

    token: Token
    message: str

    @property
    def line(self) -> int:
        return self.token.line

    def __str__(self) -> str:
        if self.token.type == TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{self.token.lexeme}'"
        return f"[line {self.token.line}] Error{where}: {self.message}"


@dataclass
class Resolution:
    """Outcome of resolving one parse unit."""

    table: ResolutionTable
    errors: list[StaticError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class Resolver:
    """Single static pass producing a ``ResolutionTable``.

    Each scope frame maps a name to ``False`` (declared) or ``True``
    (defined).  The global scope is not on the stack: top-level names are
    never checked, which lets top-level declarations refer to each other
    before they appear.
    """

    def __init__(self) -> None:
        self.table = ResolutionTable()
        self.errors: list[StaticError] = []
        self._scopes: list[dict[str, bool]] = []
        self._current_function = FunctionType.NONE
        self._current_class = ClassType.NONE

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def resolve(self, statements: list[Statement]) -> Resolution:
        for stmt in statements:
            self._resolve_stmt(stmt)
        logger.info(
            "Resolved %d local references (%d static errors)",
            len(self.table),
            len(self.errors),
        )
        return Resolution(table=self.table, errors=list(self.errors))

    # -----------------------------------------------------------------------
    # Scope bookkeeping
    # -----------------------------------------------------------------------

    def _begin_scope(self) -> None:
        self._scopes.append({})

    def _end_scope(self) -> None:
        self._scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self._scopes:
            return
        scope = self._scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self._scopes:
            return
        self._scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expression, name: Token) -> None:
        for distance, scope in enumerate(reversed(self._scopes)):
            if name.lexeme in scope:
                self.table.record(expr, distance)
                return
        # Not found: left to the global scope at runtime.

    def _resolve_function(self, function: FunctionStatement, kind: FunctionType) -> None:
        enclosing_function = self._current_function
        self._current_function = kind
        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self._resolve_body(function.body)
        self._end_scope()
        self._current_function = enclosing_function

    def _resolve_body(self, stmts: list[Statement]) -> None:
        for stmt in stmts:
            self._resolve_stmt(stmt)

    def _error(self, token: Token, message: str) -> None:
        self.errors.append(StaticError(token=token, message=message))

    # -----------------------------------------------------------------------
    # Statement dispatch
    # -----------------------------------------------------------------------

    def _resolve_stmt(self, stmt: Statement) -> None:
        handler = self._STMT_DISPATCH[stmt.kind]
        handler(self, stmt)

    def _resolve_block(self, stmt: BlockStatement) -> None:
        self._begin_scope()
        self._resolve_body(stmt.statements)
        self._end_scope()

    def _resolve_class(self, stmt: ClassStatement) -> None:
        enclosing_class = self._current_class
        self._current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        superclass = stmt.superclass
        if superclass is not None:
            if superclass.name.lexeme == stmt.name.lexeme:
                self._error(superclass.name, "A class can't inherit from itself.")
            self._current_class = ClassType.SUBCLASS
            self._resolve_expr(superclass)

            self._begin_scope()
            self._scopes[-1][SUPER_NAME] = True

        self._begin_scope()
        self._scopes[-1][THIS_NAME] = True

        for method in stmt.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == INITIALIZER_NAME:
                kind = FunctionType.INITIALIZER
            self._resolve_function(method, kind)

        self._end_scope()
        if superclass is not None:
            self._end_scope()

        self._current_class = enclosing_class

    def _resolve_expression_stmt(self, stmt: ExpressionStatement) -> None:
        self._resolve_expr(stmt.expression)

    def _resolve_function_stmt(self, stmt: FunctionStatement) -> None:
        # Defined before the body so the function can call itself.
        self._declare(stmt.name)
        self._define(stmt.name)
        self._resolve_function(stmt, FunctionType.FUNCTION)

    def _resolve_if(self, stmt: IfStatement) -> None:
        self._resolve_expr(stmt.condition)
        self._resolve_stmt(stmt.then_branch)
        if stmt.else_branch is not None:
            self._resolve_stmt(stmt.else_branch)

    def _resolve_print(self, stmt: PrintStatement) -> None:
        self._resolve_expr(stmt.expression)

    def _resolve_return(self, stmt: ReturnStatement) -> None:
        if self._current_function == FunctionType.NONE:
            self._error(stmt.keyword, "Can't return from top-level code.")
        if stmt.value is not None:
            if self._current_function == FunctionType.INITIALIZER:
                self._error(stmt.keyword, "Can't return a value from an initializer.")
            self._resolve_expr(stmt.value)

    def _resolve_var(self, stmt: VarStatement) -> None:
        self._declare(stmt.name)
        if stmt.initializer is not None:
            self._resolve_expr(stmt.initializer)
        self._define(stmt.name)

    def _resolve_while(self, stmt: WhileStatement) -> None:
        self._resolve_expr(stmt.condition)
        self._resolve_stmt(stmt.body)

    _STMT_DISPATCH: dict[str, Callable[[Resolver, Statement], None]] = {
        "block": _resolve_block,
        "class": _resolve_class,
        "expression": _resolve_expression_stmt,
        "function": _resolve_function_stmt,
        "if": _resolve_if,
        "print": _resolve_print,
        "return": _resolve_return,
        "var": _resolve_var,
        "while": _resolve_while,
    }

    # -----------------------------------------------------------------------
    # Expression dispatch
    # -----------------------------------------------------------------------

    def _resolve_expr(self, expr: Expression) -> None:
        handler = self._EXPR_DISPATCH[expr.kind]
        handler(self, expr)

    def _resolve_assign(self, expr: AssignExpr) -> None:
        self._resolve_expr(expr.value)
        self._resolve_local(expr, expr.name)

    def _resolve_binary(self, expr: BinaryExpr) -> None:
        self._resolve_expr(expr.left)
        self._resolve_expr(expr.right)

    def _resolve_call(self, expr: CallExpr) -> None:
        self._resolve_expr(expr.callee)
        for argument in expr.arguments:
            self._resolve_expr(argument)

    def _resolve_get(self, expr: GetExpr) -> None:
        # Property names are looked up dynamically; only the object resolves.
        self._resolve_expr(expr.object)

    def _resolve_grouping(self, expr: GroupingExpr) -> None:
        self._resolve_expr(expr.expression)

    def _resolve_literal(self, _expr: Expression) -> None:
        pass

    def _resolve_logical(self, expr: LogicalExpr) -> None:
        self._resolve_expr(expr.left)
        self._resolve_expr(expr.right)

    def _resolve_set(self, expr: SetExpr) -> None:
        self._resolve_expr(expr.value)
        self._resolve_expr(expr.object)

    def _resolve_super(self, expr: SuperExpr) -> None:
        if self._current_class == ClassType.NONE:
            self._error(expr.keyword, "Can't use 'super' outside of a class.")
        elif self._current_class != ClassType.SUBCLASS:
            self._error(expr.keyword, "Can't use 'super' in a class with no superclass.")
        self._resolve_local(expr, expr.keyword)

    def _resolve_this(self, expr: ThisExpr) -> None:
        if self._current_class == ClassType.NONE:
            self._error(expr.keyword, "Can't use 'this' outside of a class.")
        self._resolve_local(expr, expr.keyword)

    def _resolve_unary(self, expr: UnaryExpr) -> None:
        self._resolve_expr(expr.right)

    def _resolve_variable(self, expr: VariableExpr) -> None:
        if self._scopes and self._scopes[-1].get(expr.name.lexeme) is False:
            self._error(expr.name, "Can't read local variable in its own initializer.")
        self._resolve_local(expr, expr.name)

    _EXPR_DISPATCH: dict[str, Callable[[Resolver, Expression], None]] = {
        "assign": _resolve_assign,
        "binary": _resolve_binary,
        "call": _resolve_call,
        "get": _resolve_get,
        "grouping": _resolve_grouping,
        "literal": _resolve_literal,
        "logical": _resolve_logical,
        "set": _resolve_set,
        "super": _resolve_super,
        "this": _resolve_this,
        "unary": _resolve_unary,
        "variable": _resolve_variable,
    }


def resolve(statements: list[Statement]) -> Resolution:
    """Resolve one parse unit with a fresh resolver."""
    return Resolver().resolve(statements)
