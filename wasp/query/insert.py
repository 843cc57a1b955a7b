"""INSERT statement."""

from typing import Any

from pydantic import field_validator, model_validator

from ._bases import Expression
from .statement import Statement
from .table import TableClause
from .update import coerce_values


class Insert(Statement):
    """``INSERT INTO table (columns) VALUES (values)`` for one row."""

    values: dict[str, Expression]

    @field_validator("table")
    @classmethod
    def _check_no_alias(cls, table: TableClause) -> TableClause:
        if table.alias is not None:
            raise ValueError(f"INSERT target cannot have an alias: {table.alias}")
        return table

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, values: Any) -> dict[str, Expression]:
        return coerce_values(values)

    @model_validator(mode="after")
    def _check_no_where(self) -> "Insert":
        if self.where is not None:
            raise ValueError("INSERT does not take a WHERE clause")
        return self

    def to_sql(self, parameters, enclose: bool = False) -> str:
        with parameters.scope(self.table):
            self.register_tables(parameters)
            columns = ", ".join(parameters.ident_quote(column) for column in self.values)
            values = ", ".join(value.to_sql(parameters, True) for value in self.values.values())
            return f"INSERT INTO {self.table.declaration_sql(parameters)} ({columns}) VALUES ({values})"
