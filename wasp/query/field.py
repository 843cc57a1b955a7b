"""Field references, wildcards and select-list aliases."""

from typing import Any, Optional

from pydantic import field_validator

from ._bases import Clause, Expression, to_expression
from .table import TableClause


def _coerce_table(table: Any) -> Optional[TableClause]:
    if table is None or isinstance(table, TableClause):
        return table
    if isinstance(table, str):
        return TableClause(name=table)
    raise ValueError(f"Invalid table: {table!r}")


class FieldExpression(Expression):
    """Reference to a column, qualified by ``table`` or by the default table at render time."""

    field: str
    table: Optional[TableClause] = None

    @field_validator("field")
    @classmethod
    def _check_field(cls, field: str) -> str:
        if not field:
            raise ValueError("Invalid field: empty name")
        return field

    @field_validator("table", mode="before")
    @classmethod
    def _check_table(cls, table: Any) -> Optional[TableClause]:
        return _coerce_table(table)

    def register_tables(self, parameters) -> None:
        if self.table is not None:
            self.table.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        table = self.table if self.table is not None else parameters.get_default_table()
        if table is not None:
            return table.to_sql(parameters, False) + "." + parameters.ident_quote(self.field)
        return parameters.ident_quote(self.field)


class Wildcard(Expression):
    """``*``, or ``"t".*`` when a table is given."""

    table: Optional[TableClause] = None

    @field_validator("table", mode="before")
    @classmethod
    def _check_table(cls, table: Any) -> Optional[TableClause]:
        return _coerce_table(table)

    def register_tables(self, parameters) -> None:
        if self.table is not None:
            self.table.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        if self.table is not None:
            return self.table.to_sql(parameters, False) + ".*"
        return "*"


class FieldAlias(Clause):
    """Entry of a select list: an expression with an optional ``AS`` alias."""

    expression: Expression
    alias: Optional[str] = None

    @field_validator("expression", mode="before")
    @classmethod
    def _coerce_expression(cls, expression: Any) -> Expression:
        return to_expression(expression, strings_are_fields=True)

    def register_tables(self, parameters) -> None:
        self.expression.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        sql = self.expression.to_sql(parameters, True)
        if self.alias:
            sql += " AS " + parameters.ident_quote(self.alias)
        return sql
