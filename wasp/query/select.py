"""SELECT statement."""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import Field, field_validator

from ._bases import Expression
from .clauses import GroupByClause, LimitClause, OffsetClause, OrderClause
from .field import FieldAlias
from .statement import Statement
from .table import JoinClause, SourceTableClause, TableClause


class Select(Statement, Expression):
    """``SELECT [DISTINCT] fields FROM table [JOIN ...] [WHERE ...] [GROUP BY ...]
    [ORDER BY ...] [LIMIT n] [OFFSET n]``.

    Every entry of ``fields`` is a :class:`FieldAlias`; an empty list selects ``*``.
    A Select is also an expression, so it can be used as a sub-query, e.g. on the
    right-hand side of ``IN``. It renders in its own table scope.
    """

    TABLE_CLASS: ClassVar[type[TableClause]] = SourceTableClause

    fields: list[FieldAlias] = Field(default_factory=list)
    joins: list[JoinClause] = Field(default_factory=list)
    group_by: Optional[GroupByClause] = None
    order: Optional[OrderClause] = None
    limit: Optional[LimitClause] = None
    offset: Optional[OffsetClause] = None
    distinct: bool = False

    @field_validator("fields", mode="before")
    @classmethod
    def _coerce_fields(cls, fields: Any) -> list[FieldAlias]:
        return [field if isinstance(field, FieldAlias) else FieldAlias(expression=field)
                for field in fields]

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, limit: Any) -> Any:
        if isinstance(limit, int) and not isinstance(limit, bool):
            return LimitClause(number=limit)
        return limit

    @field_validator("offset", mode="before")
    @classmethod
    def _coerce_offset(cls, offset: Any) -> Any:
        if isinstance(offset, int) and not isinstance(offset, bool):
            return OffsetClause(number=offset)
        return offset

    def register_tables(self, parameters) -> None:
        """Tables of a sub-query stay in its own scope."""

    def to_sql(self, parameters, enclose: bool = False) -> str:
        with parameters.scope(self.table):
            self._register_own_tables(parameters)
            parts = ["SELECT DISTINCT" if self.distinct else "SELECT"]
            if self.fields:
                parts.append(", ".join(field.to_sql(parameters) for field in self.fields))
            else:
                parts.append("*")
            parts.append("FROM " + self.table.declaration_sql(parameters))
            parts.extend(join.to_sql(parameters) for join in self.joins)
            parts.extend(self._where_sql(parameters))
            for clause in (self.group_by, self.order):
                if clause is not None:
                    parts.append(clause.to_sql(parameters))
            parts.extend(parameters.dialect.limit_offset_sql(
                None if self.limit is None else self.limit.number,
                None if self.offset is None else self.offset.number,
            ))
        sql = " ".join(parts)
        return f"({sql})" if enclose else sql

    def _register_own_tables(self, parameters) -> None:
        self.table.register_tables(parameters)
        for join in self.joins:
            join.register_tables(parameters)
        for field in self.fields:
            field.register_tables(parameters)
        for clause in (self.where, self.group_by, self.order):
            if clause is not None:
                clause.register_tables(parameters)
