"""Shared test helpers for the treelox test suite.

The scanner and parser are external, so tests build syntax trees
directly with the small constructors below.
"""

import io

from treelox.interpret import Session
from treelox.model.expressions import (
    AssignExpr,
    BinaryExpr,
    CallExpr,
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
    VarStatement,
    WhileStatement,
)
from treelox.model.tokens import Token, TokenType


OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "!": TokenType.BANG,
    "==": TokenType.EQUAL_EQUAL,
    "!=": TokenType.BANG_EQUAL,
    ">": TokenType.GREATER,
    ">=": TokenType.GREATER_EQUAL,
    "<": TokenType.LESS,
    "<=": TokenType.LESS_EQUAL,
    "and": TokenType.AND,
    "or": TokenType.OR,
}


def tok(lexeme, type=TokenType.IDENTIFIER, line=1):
    return Token(type=type, lexeme=lexeme, line=line)


def op(lexeme, line=1):
    return tok(lexeme, OPERATORS[lexeme], line)


# -- expressions --

def lit(value):
    return LiteralExpr(value=value)


def var(name, line=1):
    return VariableExpr(name=tok(name, line=line))


def assign(name, value, line=1):
    return AssignExpr(name=tok(name, line=line), value=value)


def binary(left, operator, right, line=1):
    return BinaryExpr(left=left, operator=op(operator, line), right=right)


def logical(left, operator, right):
    return LogicalExpr(left=left, operator=op(operator), right=right)


def unary(operator, right, line=1):
    return UnaryExpr(operator=op(operator, line), right=right)


def group(expr):
    return GroupingExpr(expression=expr)


def call(callee, *args, line=1):
    return CallExpr(callee=callee, paren=tok(")", TokenType.RIGHT_PAREN, line), arguments=list(args))


def get(obj, name, line=1):
    return GetExpr(object=obj, name=tok(name, line=line))


def set_(obj, name, value, line=1):
    return SetExpr(object=obj, name=tok(name, line=line), value=value)


def this(line=1):
    return ThisExpr(keyword=tok("this", TokenType.THIS, line))


def super_(method, line=1):
    return SuperExpr(keyword=tok("super", TokenType.SUPER, line), method=tok(method, line=line))


# -- statements --

def expr_stmt(expr):
    return ExpressionStatement(expression=expr)


def print_(expr):
    return PrintStatement(expression=expr)


def var_decl(name, initializer=None, line=1):
    return VarStatement(name=tok(name, line=line), initializer=initializer)


def block(*stmts):
    return BlockStatement(statements=list(stmts))


def fun(name, params, *body, line=1):
    return FunctionStatement(
        name=tok(name, line=line),
        params=[tok(p, line=line) for p in params],
        body=list(body),
    )


def ret(value=None, line=1):
    return ReturnStatement(keyword=tok("return", TokenType.RETURN, line), value=value)


def klass(name, *methods, superclass=None, line=1):
    return ClassStatement(
        name=tok(name, line=line),
        superclass=var(superclass, line=line) if superclass else None,
        methods=list(methods),
    )


def if_(condition, then_branch, else_branch=None):
    return IfStatement(condition=condition, then_branch=then_branch, else_branch=else_branch)


def while_(condition, body):
    return WhileStatement(condition=condition, body=body)


# -- running --

def run_unit(*stmts, echo=False):
    """Run statements in a fresh session; return (printed lines, result)."""
    out = io.StringIO()
    result = Session(out, echo_expressions=echo).run(list(stmts))
    return out.getvalue().splitlines(), result
