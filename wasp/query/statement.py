"""Base class for complete statements and the result of rendering one."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, field_validator

from ._bases import Expression, Node
from .clauses import WhereClause
from .parameters import Parameters
from .table import TableClause

logger = logging.getLogger(__name__)


class CompiledQuery(BaseModel):
    """SQL text and the values bound to its placeholders, ready for a driver."""

    sql: str
    values: dict[str, Any]


def coerce_where(where: Any) -> Optional[WhereClause]:
    """Accept a WhereClause, a bare expression (wrapped), or None."""
    if where is None or isinstance(where, WhereClause):
        return where
    if isinstance(where, Expression):
        return WhereClause(operand=where)
    raise ValueError(f"Invalid where clause: {where!r}")


class Statement(Node):
    """A statement on one target table with an optional WHERE clause.

    ``table`` accepts a :class:`TableClause` or a table name; anything else is
    rejected with an "Invalid table" error when the statement is constructed.
    """

    TABLE_CLASS: ClassVar[type[TableClause]] = TableClause

    table: TableClause
    where: Optional[WhereClause] = None

    @field_validator("table", mode="before")
    @classmethod
    def _check_table(cls, table: Any) -> TableClause:
        if isinstance(table, str) and table:
            return cls.TABLE_CLASS(name=table)
        if not isinstance(table, TableClause):
            raise ValueError(f"Invalid table: {table!r}")
        if not isinstance(table, cls.TABLE_CLASS):
            return cls.TABLE_CLASS(name=table.name, alias=table.alias, schema_name=table.schema_name)
        return table

    @field_validator("where", mode="before")
    @classmethod
    def _check_where(cls, where: Any) -> Optional[WhereClause]:
        return coerce_where(where)

    def register_tables(self, parameters: Parameters) -> None:
        self.table.register_tables(parameters)
        if self.where is not None:
            self.where.register_tables(parameters)

    def render(self, dialect) -> CompiledQuery:
        """Render with a fresh :class:`Parameters` for ``dialect``."""
        parameters = Parameters(dialect)
        sql = self.to_sql(parameters)
        logger.debug("Rendered %s with %d bound values", sql, len(parameters.values))
        return CompiledQuery(sql=sql, values=dict(parameters.values))

    def _where_sql(self, parameters: Parameters) -> list[str]:
        if self.where is None:
            return []
        return [self.where.to_sql(parameters)]
