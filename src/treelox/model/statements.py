"""Statement nodes of the syntax tree."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .expressions import Expression, VariableExpr
from .tokens import Token


class BlockStatement(BaseModel):
    kind: Literal["block"] = "block"
    statements: list[Statement] = []


class FunctionStatement(BaseModel):
    """Named function declaration; also used for class methods."""

    kind: Literal["function"] = "function"
    name: Token
    params: list[Token] = []
    body: list[Statement] = []


class ClassStatement(BaseModel):
    kind: Literal["class"] = "class"
    name: Token
    superclass: VariableExpr | None = None
    methods: list[FunctionStatement] = []


class ExpressionStatement(BaseModel):
    """Evaluate an expression for its side effects."""

    kind: Literal["expression"] = "expression"
    expression: Expression


class IfStatement(BaseModel):
    kind: Literal["if"] = "if"
    condition: Expression
    then_branch: Statement
    else_branch: Statement | None = None


class PrintStatement(BaseModel):
    kind: Literal["print"] = "print"
    expression: Expression


class ReturnStatement(BaseModel):
    kind: Literal["return"] = "return"
    keyword: Token
    value: Expression | None = None


class VarStatement(BaseModel):
    kind: Literal["var"] = "var"
    name: Token
    initializer: Expression | None = None


class WhileStatement(BaseModel):
    kind: Literal["while"] = "while"
    condition: Expression
    body: Statement


Statement = Annotated[
    Union[
        BlockStatement,
        ClassStatement,
        ExpressionStatement,
        FunctionStatement,
        IfStatement,
        PrintStatement,
        ReturnStatement,
        VarStatement,
        WhileStatement,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Statement references.
BlockStatement.model_rebuild()
FunctionStatement.model_rebuild()
ClassStatement.model_rebuild()
ExpressionStatement.model_rebuild()
IfStatement.model_rebuild()
PrintStatement.model_rebuild()
ReturnStatement.model_rebuild()
VarStatement.model_rebuild()
WhileStatement.model_rebuild()
