"""Operator expressions: comparisons, boolean logic, NOT and IS [NOT] NULL."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator, model_validator

from ._bases import Expression, to_expression
from .constant import ConstantArray, ConstantExpression

COMPARISON_OPERATORS = frozenset({
    "=", "!=", "<>", "<", ">", "<=", ">=",
    "LIKE", "NOT LIKE", "IN", "NOT IN", "IS", "IS NOT",
})
"""Operators accepted by :class:`ComparisonOperator`."""

_NULL_OPERATORS = {"=": "IS", "!=": "IS NOT", "<>": "IS NOT"}


def _normalize_operator(operator: Any) -> Any:
    if isinstance(operator, str):
        return " ".join(operator.upper().split())
    return operator


def _enclosed(sql: str, enclose: bool) -> str:
    return f"({sql})" if enclose else sql


class ComparisonOperator(Expression):
    """Binary comparison ``left operator right``.

    Left strings name fields, right values that are not expressions are bound as
    constants. Comparing to a NULL constant with ``=`` or ``!=`` renders ``IS`` /
    ``IS NOT``, since ``= NULL`` is never true in SQL.
    """

    operator: str
    left: Expression
    right: Expression

    @field_validator("operator", mode="before")
    @classmethod
    def _check_operator(cls, operator: Any) -> str:
        operator = _normalize_operator(operator)
        if operator not in COMPARISON_OPERATORS:
            raise ValueError(f"Invalid comparison operator: {operator!r}")
        return operator

    @field_validator("left", mode="before")
    @classmethod
    def _coerce_left(cls, left: Any) -> Expression:
        return to_expression(left, strings_are_fields=True)

    @field_validator("right", mode="before")
    @classmethod
    def _coerce_right(cls, right: Any) -> Expression:
        return to_expression(right)

    @model_validator(mode="after")
    def _check_list_operand(self) -> ComparisonOperator:
        from .select import Select
        if self.operator in ("IN", "NOT IN") and not isinstance(self.right, (ConstantArray, Select)):
            raise ValueError(f"{self.operator} needs a list of values or a sub-query")
        return self

    def register_tables(self, parameters) -> None:
        self.left.register_tables(parameters)
        self.right.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        operator = self.operator
        if isinstance(self.right, ConstantExpression) and self.right.is_null():
            operator = _NULL_OPERATORS.get(operator, operator)
        left = self.left.to_sql(parameters, True)
        right = self.right.to_sql(parameters, True)
        return _enclosed(f"{left} {operator} {right}", enclose)


class BooleanOperator(Expression):
    """``AND`` / ``OR`` over one or more operands; operands are always parenthesized."""

    operator: str
    operands: list[Expression]

    @field_validator("operator", mode="before")
    @classmethod
    def _check_operator(cls, operator: Any) -> str:
        operator = _normalize_operator(operator)
        if operator not in ("AND", "OR"):
            raise ValueError(f"Invalid boolean operator: {operator!r}")
        return operator

    @field_validator("operands", mode="before")
    @classmethod
    def _check_operands(cls, operands: Any) -> list[Expression]:
        operands = list(operands)
        if not operands:
            raise ValueError("A boolean operator needs at least one operand")
        for operand in operands:
            if not isinstance(operand, Expression):
                raise ValueError(f"Invalid boolean operand: {operand!r}")
        return operands

    def register_tables(self, parameters) -> None:
        for operand in self.operands:
            operand.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        if len(self.operands) == 1:
            return self.operands[0].to_sql(parameters, enclose)
        parts = [operand.to_sql(parameters, True) for operand in self.operands]
        return _enclosed(f" {self.operator} ".join(parts), enclose)


class NotOperator(Expression):
    """``NOT operand``."""

    operand: Expression

    @field_validator("operand", mode="before")
    @classmethod
    def _check_operand(cls, operand: Any) -> Expression:
        if not isinstance(operand, Expression):
            raise ValueError(f"Invalid operand for NOT: {operand!r}")
        return operand

    def register_tables(self, parameters) -> None:
        self.operand.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return _enclosed("NOT " + self.operand.to_sql(parameters, True), enclose)


class UnaryOperator(Expression):
    """Postfix test on one operand: ``IS NULL`` or ``IS NOT NULL``."""

    operator: str
    operand: Expression

    @field_validator("operator", mode="before")
    @classmethod
    def _check_operator(cls, operator: Any) -> str:
        operator = _normalize_operator(operator)
        if operator not in ("IS NULL", "IS NOT NULL"):
            raise ValueError(f"Invalid unary operator: {operator!r}")
        return operator

    @field_validator("operand", mode="before")
    @classmethod
    def _coerce_operand(cls, operand: Any) -> Expression:
        return to_expression(operand, strings_are_fields=True)

    def register_tables(self, parameters) -> None:
        self.operand.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return _enclosed(f"{self.operand.to_sql(parameters, True)} {self.operator}", enclose)
