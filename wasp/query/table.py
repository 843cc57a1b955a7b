"""Table references and joins."""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import field_validator, model_validator

from ._bases import Clause, Expression, to_expression


class TableClause(Clause):
    """Reference to a table, optionally aliased and schema-qualified.

    Used to qualify fields, it renders as the alias when there is one (``"t1"``),
    else as the table name. ``declaration_sql`` renders the form used after
    ``FROM``, ``JOIN``, ``UPDATE`` and ``INTO``.
    """

    name: str
    alias: Optional[str] = None
    schema_name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        if not name:
            raise ValueError("Invalid table: empty name")
        return name

    @property
    def reference(self) -> str:
        """Name fields use to refer to this table."""
        return self.alias or self.name

    def register_tables(self, parameters) -> None:
        parameters.register_table(self)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        if self.alias:
            return parameters.ident_quote(self.alias)
        return self._qualified_name(parameters)

    def declaration_sql(self, parameters) -> str:
        """Table with its alias (e.g. ``"test" AS "t1"``)."""
        sql = self._qualified_name(parameters)
        if self.alias:
            sql += " AS " + parameters.ident_quote(self.alias)
        return sql

    def _qualified_name(self, parameters) -> str:
        if self.schema_name:
            return parameters.ident_quote(self.schema_name) + "." + parameters.ident_quote(self.name)
        return parameters.ident_quote(self.name)


class SourceTableClause(TableClause):
    """A table declared as a source of rows, in ``FROM`` or in a ``JOIN``."""

    @classmethod
    def from_table(cls, table: TableClause) -> SourceTableClause:
        """Promote a plain table reference to a source declaration."""
        if isinstance(table, SourceTableClause):
            return table
        return cls(name=table.name, alias=table.alias, schema_name=table.schema_name)


class JoinKind(str, enum.Enum):
    """Kinds of join; the value is the SQL keyword."""

    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    CROSS = "CROSS"


class OnClause(Clause):
    """``ON`` condition of a join."""

    condition: Expression

    @field_validator("condition", mode="before")
    @classmethod
    def _coerce_condition(cls, condition: Any) -> Expression:
        if not isinstance(condition, Expression):
            raise ValueError(f"Invalid join condition: {condition!r}")
        return condition

    def register_tables(self, parameters) -> None:
        self.condition.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        return "ON " + self.condition.to_sql(parameters, False)


class JoinClause(Clause):
    """Join of ``target`` on ``condition``; only CROSS joins go without a condition."""

    target: SourceTableClause
    condition: Optional[Expression] = None
    kind: JoinKind = JoinKind.INNER

    @field_validator("target", mode="before")
    @classmethod
    def _coerce_target(cls, target: Any) -> SourceTableClause:
        if isinstance(target, str):
            return SourceTableClause(name=target)
        if not isinstance(target, TableClause):
            raise ValueError(f"Invalid table: {target!r}")
        return SourceTableClause.from_table(target)

    @field_validator("condition", mode="before")
    @classmethod
    def _coerce_condition(cls, condition: Any) -> Optional[Expression]:
        if condition is None:
            return None
        if isinstance(condition, OnClause):
            return condition.condition
        return to_expression(condition)

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, kind: Any) -> Any:
        if isinstance(kind, str):
            return kind.upper()
        return kind

    @model_validator(mode="after")
    def _check_condition(self) -> JoinClause:
        if self.kind is JoinKind.CROSS and self.condition is not None:
            raise ValueError("A CROSS join cannot have a condition")
        if self.kind is not JoinKind.CROSS and self.condition is None:
            raise ValueError(f"A {self.kind.value} join needs a condition")
        return self

    def register_tables(self, parameters) -> None:
        self.target.register_tables(parameters)
        if self.condition is not None:
            self.condition.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        sql = f"{self.kind.value} JOIN {self.target.declaration_sql(parameters)}"
        if self.condition is not None:
            sql += " ON " + self.condition.to_sql(parameters, False)
        return sql
