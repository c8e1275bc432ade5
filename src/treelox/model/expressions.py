"""Expression nodes of the syntax tree."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from .tokens import Token


class AssignExpr(BaseModel):
    """``name = value`` for a plain variable."""

    kind: Literal["assign"] = "assign"
    name: Token
    value: Expression


class BinaryExpr(BaseModel):
    kind: Literal["binary"] = "binary"
    left: Expression
    operator: Token
    right: Expression


class CallExpr(BaseModel):
    """Call of any callee expression.

    *paren* is the closing parenthesis; its line locates call errors.
    """

    kind: Literal["call"] = "call"
    callee: Expression
    paren: Token
    arguments: list[Expression] = []


class GetExpr(BaseModel):
    """Property read: object.name."""

    kind: Literal["get"] = "get"
    object: Expression
    name: Token


class GroupingExpr(BaseModel):
    kind: Literal["grouping"] = "grouping"
    expression: Expression


class LiteralExpr(BaseModel):
    """A constant: nil, true/false, a number or a string."""

    kind: Literal["literal"] = "literal"
    value: bool | float | str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _single_number_type(cls, value):
        # The language has one number type.
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return value


class LogicalExpr(BaseModel):
    """Short-circuiting ``and`` / ``or``."""

    kind: Literal["logical"] = "logical"
    left: Expression
    operator: Token
    right: Expression


class SetExpr(BaseModel):
    """Property write: object.name = value."""

    kind: Literal["set"] = "set"
    object: Expression
    name: Token
    value: Expression


class SuperExpr(BaseModel):
    kind: Literal["super"] = "super"
    keyword: Token
    method: Token


class ThisExpr(BaseModel):
    kind: Literal["this"] = "this"
    keyword: Token


class UnaryExpr(BaseModel):
    kind: Literal["unary"] = "unary"
    operator: Token
    right: Expression


class VariableExpr(BaseModel):
    """Reference to a variable by name."""

    kind: Literal["variable"] = "variable"
    name: Token


Expression = Annotated[
    Union[
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
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
AssignExpr.model_rebuild()
BinaryExpr.model_rebuild()
CallExpr.model_rebuild()
GetExpr.model_rebuild()
GroupingExpr.model_rebuild()
LogicalExpr.model_rebuild()
SetExpr.model_rebuild()
UnaryExpr.model_rebuild()
