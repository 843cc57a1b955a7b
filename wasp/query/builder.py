"""Fluent construction API for queries.

``Builder`` (usually imported as ``Q``) is a stateless set of named constructors.
Each one checks the shape of its arguments and returns an expression, a clause,
or a statement::

    from wasp.query import Q

    query = Q.select(
        Q.field("id"),
        Q.alias("name", "user_name"),
        Q.from_("users", "u"),
        Q.join(Q.with_("groups", "g"), Q.on(Q.equals(Q.field("id", "g"), Q.field("group_id", "u")))),
        Q.where(Q.equals("active", True)),
        Q.order(("name", "DESC")),
        Q.limit(10),
    )
    compiled = query.render(SqliteDialect())

``select``, ``delete``, ``update``, ``insert`` and ``upsert`` accept their
clauses in any order and put each one in its slot according to its type.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ._bases import Expression, to_expression
from .clauses import GroupByClause, LimitClause, OffsetClause, OrderClause, WhereClause
from .constant import ConstantExpression
from .delete import Delete
from .field import FieldAlias, FieldExpression, Wildcard
from .function import FunctionExpression
from .insert import Insert
from .operators import BooleanOperator, ComparisonOperator, NotOperator, UnaryOperator
from .select import Select
from .table import JoinClause, JoinKind, OnClause, SourceTableClause, TableClause
from .update import Update
from .upsert import Upsert


def _and_all(operands: tuple[Any, ...]) -> Expression:
    if len(operands) == 1 and isinstance(operands[0], Expression):
        return operands[0]
    return BooleanOperator(operator="AND", operands=operands)


def _set_once(slots: dict[str, Any], name: str, value: Any) -> None:
    if slots.get(name) is not None:
        raise ValueError(f"Duplicate {name} clause")
    slots[name] = value


class Builder:
    """Named constructors for expressions, clauses and statements."""

    # expressions

    @staticmethod
    def field(name: str, table: Optional[str | TableClause] = None) -> FieldExpression:
        """Field ``name``, optionally qualified by a table name, alias or clause."""
        return FieldExpression(field=name, table=table)

    @staticmethod
    def all(table: Optional[str | TableClause] = None) -> Wildcard:
        """``*``, or every column of ``table``."""
        return Wildcard(table=table)

    @staticmethod
    def constant(value: Any) -> ConstantExpression:
        return ConstantExpression(value=value)

    @staticmethod
    def alias(expression: Any, alias: str) -> FieldAlias:
        """Select-list entry ``expression AS alias``; strings name fields."""
        return FieldAlias(expression=expression, alias=alias)

    @staticmethod
    def func(name: str, *arguments: Any) -> FunctionExpression:
        """Function call; arguments that are not expressions are bound as constants."""
        return FunctionExpression(name=name, arguments=arguments)

    @staticmethod
    def count(expression: Any = None) -> FunctionExpression:
        """``COUNT(*)``, or ``COUNT(field)`` when a field (name) is given."""
        argument = Wildcard() if expression is None else to_expression(expression, strings_are_fields=True)
        return FunctionExpression(name="COUNT", arguments=[argument])

    # comparisons and logic

    @staticmethod
    def compare(operator: str, left: Any, right: Any) -> ComparisonOperator:
        return ComparisonOperator(operator=operator, left=left, right=right)

    @staticmethod
    def equals(left: Any, right: Any) -> ComparisonOperator:
        """``left = right``: a string on the left names a field, the right is bound as a value."""
        return ComparisonOperator(operator="=", left=left, right=right)

    @staticmethod
    def not_equals(left: Any, right: Any) -> ComparisonOperator:
        return ComparisonOperator(operator="!=", left=left, right=right)

    @staticmethod
    def less_than(left: Any, right: Any) -> ComparisonOperator:
        return ComparisonOperator(operator="<", left=left, right=right)

    @staticmethod
    def less_or_equal(left: Any, right: Any) -> ComparisonOperator:
        return ComparisonOperator(operator="<=", left=left, right=right)

    @staticmethod
    def greater_than(left: Any, right: Any) -> ComparisonOperator:
        return ComparisonOperator(operator=">", left=left, right=right)

    @staticmethod
    def greater_or_equal(left: Any, right: Any) -> ComparisonOperator:
        return ComparisonOperator(operator=">=", left=left, right=right)

    @staticmethod
    def like(left: Any, pattern: Any) -> ComparisonOperator:
        return ComparisonOperator(operator="LIKE", left=left, right=pattern)

    @staticmethod
    def in_(left: Any, values: Any) -> ComparisonOperator:
        """``left IN (...)`` for a list of values or a sub-query."""
        return ComparisonOperator(operator="IN", left=left, right=values)

    @staticmethod
    def is_null(operand: Any) -> UnaryOperator:
        return UnaryOperator(operator="IS NULL", operand=operand)

    @staticmethod
    def is_not_null(operand: Any) -> UnaryOperator:
        return UnaryOperator(operator="IS NOT NULL", operand=operand)

    @staticmethod
    def and_(*operands: Expression) -> BooleanOperator:
        return BooleanOperator(operator="AND", operands=operands)

    @staticmethod
    def or_(*operands: Expression) -> BooleanOperator:
        return BooleanOperator(operator="OR", operands=operands)

    @staticmethod
    def not_(operand: Expression) -> NotOperator:
        return NotOperator(operand=operand)

    # tables and joins

    @staticmethod
    def table(name: str, alias: Optional[str] = None) -> TableClause:
        """Plain table reference, as the target of DELETE, UPDATE or INSERT."""
        return TableClause(name=name, alias=alias)

    @staticmethod
    def from_(name: str, alias: Optional[str] = None) -> SourceTableClause:
        """Source table of a SELECT."""
        return SourceTableClause(name=name, alias=alias)

    @staticmethod
    def with_(name: str, alias: Optional[str] = None) -> SourceTableClause:
        """Table to join with."""
        return SourceTableClause(name=name, alias=alias)

    @staticmethod
    def on(*conditions: Expression) -> OnClause:
        """Join condition; several conditions are ANDed."""
        return OnClause(condition=_and_all(conditions))

    @staticmethod
    def join(target: str | TableClause, condition: Optional[Expression | OnClause] = None,
             kind: JoinKind | str = JoinKind.INNER) -> JoinClause:
        return JoinClause(target=target, condition=condition, kind=kind)

    @staticmethod
    def left_join(target: str | TableClause, condition: Expression | OnClause) -> JoinClause:
        return JoinClause(target=target, condition=condition, kind=JoinKind.LEFT)

    # clauses

    @staticmethod
    def where(*conditions: Expression) -> WhereClause:
        """WHERE clause; several conditions are ANDed."""
        if not conditions:
            raise ValueError("Invalid where clause: no condition given")
        return WhereClause(operand=_and_all(conditions))

    @staticmethod
    def order(*items: Any) -> OrderClause:
        """ORDER BY; items are field names, expressions or ``(field, direction)`` pairs."""
        return OrderClause(items=items)

    @staticmethod
    def group_by(*expressions: Any) -> GroupByClause:
        return GroupByClause(expressions=expressions)

    @staticmethod
    def limit(number: int) -> LimitClause:
        return LimitClause(number=number)

    @staticmethod
    def offset(number: int) -> OffsetClause:
        return OffsetClause(number=number)

    # statements

    @staticmethod
    def select(*parts: Any, distinct: bool = False) -> Select:
        """Assemble a SELECT from fields, a source table, joins and clauses in any order.

        Strings and expressions are select-list entries; exactly one table is required.
        """
        slots: dict[str, Any] = {"fields": [], "joins": [], "distinct": distinct}
        for part in parts:
            if isinstance(part, TableClause):
                _set_once(slots, "table", part)
            elif isinstance(part, JoinClause):
                slots["joins"].append(part)
            elif isinstance(part, WhereClause):
                _set_once(slots, "where", part)
            elif isinstance(part, GroupByClause):
                _set_once(slots, "group_by", part)
            elif isinstance(part, OrderClause):
                _set_once(slots, "order", part)
            elif isinstance(part, LimitClause):
                _set_once(slots, "limit", part)
            elif isinstance(part, OffsetClause):
                _set_once(slots, "offset", part)
            elif isinstance(part, FieldAlias):
                slots["fields"].append(part)
            elif isinstance(part, (str, Expression)):
                slots["fields"].append(FieldAlias(expression=part))
            else:
                raise ValueError(f"Unknown clause for SELECT: {part!r}")
        if "table" not in slots:
            raise ValueError("Invalid table: SELECT needs a source table")
        return Select(**slots)

    @staticmethod
    def delete(*parts: Any) -> Delete:
        """Assemble a DELETE from a table and an optional WHERE clause."""
        slots = Builder._statement_slots("DELETE", parts)
        return Delete(**slots)

    @staticmethod
    def update(*parts: Any) -> Update:
        """Assemble an UPDATE from a table, a mapping of new values and a WHERE clause."""
        slots = Builder._statement_slots("UPDATE", parts, accepts_values=True)
        return Update(**slots)

    @staticmethod
    def insert(*parts: Any) -> Insert:
        """Assemble an INSERT from a table and a mapping of values."""
        slots = Builder._statement_slots("INSERT", parts, accepts_values=True, accepts_where=False)
        return Insert(**slots)

    @staticmethod
    def upsert(*parts: Any, conflict: Sequence[str], update: Optional[Sequence[str]] = None) -> Upsert:
        """Assemble an INSERT that updates the row it conflicts with on the ``conflict`` columns.

        ``update`` defaults to every inserted column outside ``conflict``.
        """
        slots = Builder._statement_slots("UPSERT", parts, accepts_values=True, accepts_where=False)
        return Upsert(**slots, conflict=list(conflict), update=None if update is None else list(update))

    @staticmethod
    def _statement_slots(statement: str, parts: tuple[Any, ...], accepts_values: bool = False,
                         accepts_where: bool = True) -> dict[str, Any]:
        slots: dict[str, Any] = {}
        for part in parts:
            if isinstance(part, (str, TableClause)):
                _set_once(slots, "table", part)
            elif accepts_where and isinstance(part, WhereClause):
                _set_once(slots, "where", part)
            elif accepts_values and isinstance(part, Mapping):
                _set_once(slots, "values", dict(part))
            else:
                raise ValueError(f"Unknown clause for {statement}: {part!r}")
        if "table" not in slots:
            raise ValueError(f"Invalid table: {statement} needs a table")
        return slots


Q = Builder
