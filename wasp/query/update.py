"""UPDATE statement."""

from typing import Any

from pydantic import field_validator

from ._bases import Expression, to_expression
from .statement import Statement


def coerce_values(values: Any) -> dict[str, Expression]:
    """Map column names to expressions; plain values become bound constants."""
    if not isinstance(values, dict):
        raise ValueError(f"Invalid values: expected a mapping of column names, got {values!r}")
    if not values:
        raise ValueError("Invalid values: at least one column is needed")
    result = {}
    for column, value in values.items():
        if not isinstance(column, str) or not column:
            raise ValueError(f"Invalid column name: {column!r}")
        result[column] = to_expression(value)
    return result


class Update(Statement):
    """``UPDATE table SET column = value, ... [WHERE ...]``."""

    values: dict[str, Expression]

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, values: Any) -> dict[str, Expression]:
        return coerce_values(values)

    def register_tables(self, parameters) -> None:
        super().register_tables(parameters)
        for value in self.values.values():
            value.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        with parameters.scope(self.table):
            self.register_tables(parameters)
            assignments = [f"{parameters.ident_quote(column)} = {value.to_sql(parameters, True)}"
                           for column, value in self.values.items()]
            parts = ["UPDATE " + self.table.declaration_sql(parameters),
                     "SET " + ", ".join(assignments)]
            parts.extend(self._where_sql(parameters))
        return " ".join(parts)
