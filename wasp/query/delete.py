"""DELETE statement."""

from pydantic import field_validator

from .statement import Statement
from .table import TableClause


class Delete(Statement):
    """``DELETE FROM table [WHERE ...]``.

    The target cannot be aliased: MySQL only accepts an alias on a single-table
    DELETE since 8.0.16.
    """

    @field_validator("table")
    @classmethod
    def _check_no_alias(cls, table: TableClause) -> TableClause:
        if table.alias is not None:
            raise ValueError(f"DELETE target cannot have an alias: {table.alias}")
        return table

    def to_sql(self, parameters, enclose: bool = False) -> str:
        with parameters.scope(self.table):
            self.register_tables(parameters)
            parts = ["DELETE FROM " + self.table.declaration_sql(parameters)]
            parts.extend(self._where_sql(parameters))
        return " ".join(parts)
