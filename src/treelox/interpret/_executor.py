"""Execution engine: tree-walking evaluator.

The ``Interpreter`` evaluates expressions and executes statements
against a chain of ``Environment`` frames.  Local references are
addressed through the resolver's table by scope distance; references
missing from the table are globals and are looked up by name.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from treelox.constants import INITIALIZER_NAME, SUPER_NAME, THIS_NAME
from treelox.model.expressions import (
    AssignExpr,
    BinaryExpr,
    CallExpr,
    Expression,
    GetExpr,
    GroupingExpr,
    LiteralExpr,
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
from treelox.resolve import ResolutionTable

from ._builtins import NATIVE_FUNCTIONS
from ._environment import UNASSIGNED, Environment
from ._objects import LoxCallable, LoxClass, LoxFunction, LoxInstance
from ._values import (
    InterpreterError,
    LoxRuntimeError,
    is_equal,
    is_truthy,
    stringify,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Control signal
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReturnSignal:
    """Returned by ``execute`` when a ``return`` statement ran.

    Every block and loop hands it upward unchanged; the nearest call
    consumes it.  Normal completion is ``None``.
    """

    value: object = None


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------

class Interpreter:
    """Tree-walking evaluator for resolved parse units.

    Parameters
    ----------
    out : TextIO
        Stream that ``print`` writes to (default ``sys.stdout``).
    echo_expressions : bool
        Print the value of every top-level expression statement, as an
        interactive prompt does.
    natives : dict[str, LoxCallable]
        Host functions bound in the global scope (default: ``clock``).
    """

    def __init__(
        self,
        out: TextIO | None = None,
        *,
        echo_expressions: bool = False,
        natives: dict[str, LoxCallable] | None = None,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.echo_expressions = echo_expressions
        self.globals = Environment()
        self.environment = self.globals
        self.locals = ResolutionTable()

        for name, native in (NATIVE_FUNCTIONS if natives is None else natives).items():
            self.globals.define(name, native)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def resolve(self, table: ResolutionTable) -> None:
        """Install the addressing table of a unit about to run."""
        self.locals.merge(table)

    def interpret(self, statements: list[Statement]) -> LoxRuntimeError | None:
        """Run a resolved unit; stop at and return the first runtime error."""
        try:
            for stmt in statements:
                if self.echo_expressions and stmt.kind == "expression":
                    self._print(self.evaluate(stmt.expression))
                else:
                    self.execute(stmt)
        except LoxRuntimeError as error:
            logger.info("Runtime error on line %d halted the unit: %s", error.line, error.message)
            return error
        return None

    def evaluate(self, expr: Expression) -> object:
        handler = self._EXPR_DISPATCH.get(expr.kind)
        if handler is None:
            raise InterpreterError(f"Unsupported expression kind: {expr.kind}")
        return handler(self, expr)

    def execute(self, stmt: Statement) -> ReturnSignal | None:
        handler = self._STMT_DISPATCH.get(stmt.kind)
        if handler is None:
            raise InterpreterError(f"Unsupported statement kind: {stmt.kind}")
        return handler(self, stmt)

    def execute_block(
        self, statements: list[Statement], environment: Environment
    ) -> ReturnSignal | None:
        """Run *statements* in *environment*, restoring the current one on every exit."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    # -----------------------------------------------------------------------
    # Statement dispatch
    # -----------------------------------------------------------------------

    def _exec_block(self, stmt: BlockStatement) -> ReturnSignal | None:
        return self.execute_block(stmt.statements, Environment(self.environment))

    def _exec_class(self, stmt: ClassStatement) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, UNASSIGNED)

        method_environment = self.environment
        if superclass is not None:
            method_environment = Environment(self.environment)
            method_environment.define(SUPER_NAME, superclass)

        methods: dict[str, LoxFunction] = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = LoxFunction(
                method,
                method_environment,
                is_initializer=method.name.lexeme == INITIALIZER_NAME,
            )

        klass = LoxClass(stmt.name.lexeme, superclass, methods)
        logger.debug("Declared class %s with %d methods", klass.name, len(methods))
        self.environment.assign(stmt.name, klass)
        return None

    def _exec_expression(self, stmt: ExpressionStatement) -> None:
        self.evaluate(stmt.expression)
        return None

    def _exec_function(self, stmt: FunctionStatement) -> None:
        function = LoxFunction(stmt, self.environment)
        logger.debug("Declared function %s/%d", function.name, function.arity())
        self.environment.define(stmt.name.lexeme, function)
        return None

    def _exec_if(self, stmt: IfStatement) -> ReturnSignal | None:
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def _exec_print(self, stmt: PrintStatement) -> None:
        self._print(self.evaluate(stmt.expression))
        return None

    def _exec_return(self, stmt: ReturnStatement) -> ReturnSignal:
        value = self.evaluate(stmt.value) if stmt.value is not None else None
        return ReturnSignal(value)

    def _exec_var(self, stmt: VarStatement) -> None:
        value = UNASSIGNED
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)
        return None

    def _exec_while(self, stmt: WhileStatement) -> ReturnSignal | None:
        while is_truthy(self.evaluate(stmt.condition)):
            signal = self.execute(stmt.body)
            if signal is not None:
                return signal
        return None

    # Statement dispatch table
    _STMT_DISPATCH: dict[str, Callable[[Interpreter, Statement], ReturnSignal | None]] = {
        "block": _exec_block,
        "class": _exec_class,
        "expression": _exec_expression,
        "function": _exec_function,
        "if": _exec_if,
        "print": _exec_print,
        "return": _exec_return,
        "var": _exec_var,
        "while": _exec_while,
    }

    def _print(self, value: object) -> None:
        print(stringify(value), file=self.out)

    # -----------------------------------------------------------------------
    # Expression dispatch
    # -----------------------------------------------------------------------

    def _eval_assign(self, expr: AssignExpr) -> object:
        value = self.evaluate(expr.value)
        distance = self.locals.depth_of(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name.lexeme, value)
        else:
            self.globals.assign(expr.name, value)
        return value

    def _eval_binary(self, expr: BinaryExpr) -> object:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        return self._apply_binop(expr.operator, left, right)

    def _apply_binop(self, operator: Token, left: object, right: object) -> object:
        op = operator.type

        # Equality is defined for every pair of values
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        _check_number_operands(operator, left, right)

        if op == TokenType.MINUS:
            return left - right
        if op == TokenType.STAR:
            return left * right
        if op == TokenType.SLASH:
            if right == 0.0:
                raise LoxRuntimeError(operator, "Divisor can not be zero.")
            return left / right

        # Comparison
        if op == TokenType.GREATER:
            return left > right
        if op == TokenType.GREATER_EQUAL:
            return left >= right
        if op == TokenType.LESS:
            return left < right
        if op == TokenType.LESS_EQUAL:
            return left <= right

        raise InterpreterError(f"Unsupported binary operator: {operator.lexeme}")

    def _eval_call(self, expr: CallExpr) -> object:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
            )
        return callee.call(self, arguments)

    def _eval_get(self, expr: GetExpr) -> object:
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def _eval_grouping(self, expr: GroupingExpr) -> object:
        return self.evaluate(expr.expression)

    def _eval_literal(self, expr: LiteralExpr) -> object:
        return expr.value

    def _eval_logical(self, expr: LogicalExpr) -> object:
        left = self.evaluate(expr.left)
        if expr.operator.type == TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.evaluate(expr.right)

    def _eval_set(self, expr: SetExpr) -> object:
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")
        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def _eval_super(self, expr: SuperExpr) -> object:
        distance = self.locals.depth_of(expr)
        if distance is None:
            raise InterpreterError(f"Unresolved 'super' on line {expr.keyword.line}")
        superclass = self.environment.get_at(distance, SUPER_NAME)
        # 'this' lives in the frame just inside the one holding 'super'.
        obj = self.environment.get_at(distance - 1, THIS_NAME)

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.")
        return method.bind(obj)

    def _eval_this(self, expr: ThisExpr) -> object:
        return self._look_up_variable(expr.keyword, expr)

    def _eval_unary(self, expr: UnaryExpr) -> object:
        right = self.evaluate(expr.right)
        if expr.operator.type == TokenType.MINUS:
            _check_number_operand(expr.operator, right)
            return -right
        if expr.operator.type == TokenType.BANG:
            return not is_truthy(right)
        raise InterpreterError(f"Unsupported unary operator: {expr.operator.lexeme}")

    def _eval_variable(self, expr: VariableExpr) -> object:
        return self._look_up_variable(expr.name, expr)

    def _look_up_variable(self, name: Token, expr: Expression) -> object:
        distance = self.locals.depth_of(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    # Expression dispatch table
    _EXPR_DISPATCH: dict[str, Callable[[Interpreter, Expression], object]] = {
        "assign": _eval_assign,
        "binary": _eval_binary,
        "call": _eval_call,
        "get": _eval_get,
        "grouping": _eval_grouping,
        "literal": _eval_literal,
        "logical": _eval_logical,
        "set": _eval_set,
        "super": _eval_super,
        "this": _eval_this,
        "unary": _eval_unary,
        "variable": _eval_variable,
    }


# ---------------------------------------------------------------------------
# Operand checks
# ---------------------------------------------------------------------------

def _check_number_operand(operator: Token, operand: object) -> None:
    if isinstance(operand, float):
        return
    raise LoxRuntimeError(operator, "Operand must be a number.")


def _check_number_operands(operator: Token, left: object, right: object) -> None:
    if isinstance(left, float) and isinstance(right, float):
        return
    raise LoxRuntimeError(operator, "Operands must be numbers.")
