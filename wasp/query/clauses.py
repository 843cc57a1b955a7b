"""Statement clauses: WHERE, ORDER BY, GROUP BY, LIMIT and OFFSET."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from ._bases import Clause, Expression, to_expression

ORDER_DIRECTIONS = ("ASC", "DESC")


class WhereClause(Clause):
    """``WHERE operand``."""

    operand: Expression

    @field_validator("operand", mode="before")
    @classmethod
    def _check_operand(cls, operand: Any) -> Expression:
        if not isinstance(operand, Expression):
            raise ValueError(f"Invalid where condition: {operand!r}")
        return operand

    def register_tables(self, parameters) -> None:
        self.operand.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return "WHERE " + self.operand.to_sql(parameters, False)


def _order_item(item: Any) -> tuple[Expression, str]:
    if isinstance(item, (tuple, list)):
        if len(item) != 2:
            raise ValueError(f"Invalid order: {item!r} is not an (expression, direction) pair")
        expression, direction = item
    else:
        expression, direction = item, "ASC"
    if not isinstance(direction, str) or direction.upper() not in ORDER_DIRECTIONS:
        raise ValueError(f"Invalid order direction: {direction!r}")
    return to_expression(expression, strings_are_fields=True), direction.upper()


class OrderClause(Clause):
    """``ORDER BY``: ordered (expression, direction) pairs.

    Items may be given as field names, expressions, or ``(field, "DESC")`` pairs.
    """

    items: list[tuple[Expression, str]]

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_items(cls, items: Any) -> list[tuple[Expression, str]]:
        if isinstance(items, (str, Expression)):
            items = [items]
        items = [_order_item(item) for item in items]
        if not items:
            raise ValueError("ORDER BY needs at least one expression")
        return items

    def register_tables(self, parameters) -> None:
        for expression, _ in self.items:
            expression.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        parts = [f"{expression.to_sql(parameters, False)} {direction}"
                 for expression, direction in self.items]
        return "ORDER BY " + ", ".join(parts)


class GroupByClause(Clause):
    """``GROUP BY`` expressions."""

    expressions: list[Expression]

    @field_validator("expressions", mode="before")
    @classmethod
    def _coerce_expressions(cls, expressions: Any) -> list[Expression]:
        if isinstance(expressions, (str, Expression)):
            expressions = [expressions]
        expressions = [to_expression(e, strings_are_fields=True) for e in expressions]
        if not expressions:
            raise ValueError("GROUP BY needs at least one expression")
        return expressions

    def register_tables(self, parameters) -> None:
        for expression in self.expressions:
            expression.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return "GROUP BY " + ", ".join(e.to_sql(parameters, False) for e in self.expressions)


class LimitClause(Clause):
    """``LIMIT number``; a validated integer, rendered inline."""

    number: int = Field(strict=True, ge=0)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return f"LIMIT {self.number}"


class OffsetClause(Clause):
    """``OFFSET number``; a validated integer, rendered inline."""

    number: int = Field(strict=True, ge=0)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return f"OFFSET {self.number}"
