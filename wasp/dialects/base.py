"""Base Dialect type: identifier quoting, placeholders, and DDL for one SQL flavor."""

from __future__ import annotations

import datetime
import decimal
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable, Mapping, Optional, TYPE_CHECKING

from pydantic import BaseModel

from ..errors import DBError
from ..schema import Column, ColumnType, ForeignKey, Index, IndexType, Table

if TYPE_CHECKING:
    from ..config import DatabaseConfig
    from ..query import Select


class Dialect(BaseModel, ABC):
    """Base for database dialects.

    The query builder only relies on :meth:`ident_quote` and :meth:`placeholder`.
    Everything else generates DDL from the schema model: each ``create_*`` /
    ``drop_*`` method returns the list of statements to execute, in order, and
    never touches a connection.
    """

    model_config = {"arbitrary_types_allowed": True}

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ()
    """URL schemes this dialect handles (e.g. ('postgresql', 'pgsql'))."""

    IDENT_QUOTE: ClassVar[str] = '"'
    """Character that opens and closes a quoted identifier."""

    PARAMSTYLE: ClassVar[str] = "named"
    """DB-API parameter style of the driver: ``named`` (``:p1``) or ``pyformat`` (``%(p1)s``)."""

    TYPE_MAPPING: ClassVar[dict[ColumnType, str]] = {}
    """SQL type name for each portable column type."""

    COLUMN_TYPES: ClassVar[dict[str, ColumnType]] = {}
    """Portable column type for each (lowercase) type name reported by the database."""

    UNBOUNDED_LIMIT: ClassVar[Optional[str]] = None
    """LIMIT meaning "every row", for engines that reject an OFFSET without a LIMIT."""

    @abstractmethod
    def connect(self, config: DatabaseConfig) -> Any:
        """Return a new raw driver connection for the given configuration."""
        ...  # pylint: disable=unnecessary-ellipsis

    def begin(self, connection: Any) -> None:
        """Start a transaction on a raw connection; drivers that begin implicitly do nothing."""

    # query rendering

    def ident_quote(self, name: str) -> str:
        """Quote an identifier, doubling any quote character inside it."""
        quote = self.IDENT_QUOTE
        return quote + name.replace(quote, quote + quote) + quote

    def placeholder(self, token: str) -> str:
        if self.PARAMSTYLE == "pyformat":
            return f"%({token})s"
        return f":{token}"

    def limit_offset_sql(self, limit: Optional[int], offset: Optional[int]) -> list[str]:
        """LIMIT and OFFSET clauses of a SELECT."""
        parts = []
        if limit is not None:
            parts.append(f"LIMIT {limit}")
        elif offset is not None and self.UNBOUNDED_LIMIT is not None:
            parts.append(f"LIMIT {self.UNBOUNDED_LIMIT}")
        if offset is not None:
            parts.append(f"OFFSET {offset}")
        return parts

    def upsert_sql(self, conflict: list[str], update: list[str]) -> str:
        """Clause appended to an INSERT to update the row conflicting on ``conflict``."""
        target = self._column_list(conflict)
        if not update:
            return f"ON CONFLICT {target} DO NOTHING"
        assignments = ", ".join(
            f"{self.ident_quote(column)} = excluded.{self.ident_quote(column)}" for column in update
        )
        return f"ON CONFLICT {target} DO UPDATE SET {assignments}"

    @abstractmethod
    def table_exists_query(self, name: str) -> Select:
        """Query returning one row when a table called ``name`` exists."""
        ...  # pylint: disable=unnecessary-ellipsis

    # introspection

    @abstractmethod
    def columns_query(self, name: str) -> Select | str:
        """Query describing the columns of table ``name``, one row per column, in order."""
        ...  # pylint: disable=unnecessary-ellipsis

    def columns_from_rows(self, rows: Iterable[Mapping[str, Any]]) -> list[Column]:
        return [self.column_from_row(row) for row in rows]

    def column_from_row(self, row: Mapping[str, Any]) -> Column:
        """Column model from one row of :meth:`columns_query`.

        Rows carry ``name``, ``data_type``, ``max_length``, ``numeric_precision``,
        ``numeric_scale``, ``is_nullable`` (``YES`` or ``NO``) and ``default``.
        Defaults are returned as the SQL text the database reports.
        """
        column_type = self.column_type(row)
        serial = self.is_serial(row)
        sized = column_type in (ColumnType.CHAR, ColumnType.VARCHAR)
        numeric = column_type is ColumnType.DECIMAL
        return Column(
            name=row["name"],
            type=column_type,
            max_length=row["max_length"] if sized else None,
            numeric_precision=row["numeric_precision"] if numeric else None,
            numeric_scale=row["numeric_scale"] if numeric else None,
            nullable=str(row["is_nullable"]).upper() == "YES",
            default=None if serial else row["default"],
            serial=serial,
        )

    def column_type(self, row: Mapping[str, Any]) -> ColumnType:
        data_type = str(row["data_type"])
        try:
            return self.COLUMN_TYPES[data_type.lower()]
        except KeyError as error:
            raise DBError(f"Unsupported column type: {data_type}") from error

    def is_serial(self, row: Mapping[str, Any]) -> bool:
        return False

    # column definitions

    def type_sql(self, column: Column) -> str:
        """SQL type of ``column``, with length or precision where the type takes one."""
        try:
            sql = self.TYPE_MAPPING[column.type]
        except KeyError as error:
            raise DBError(f"Unsupported column type: {column.type.value}") from error
        if column.type in (ColumnType.CHAR, ColumnType.VARCHAR):
            if column.max_length is None:
                raise DBError(f"Column {column.name} needs a maximum length")
            sql += f"({column.max_length})"
        elif column.type is ColumnType.DECIMAL and column.numeric_precision is not None:
            sql += f"({column.numeric_precision},{column.numeric_scale or 0})"
        return sql

    def literal(self, value: Any) -> str:
        """Inline SQL literal for a column default."""
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float, decimal.Decimal)):
            return str(value)
        if isinstance(value, (datetime.date, datetime.time)):
            value = value.isoformat(sep=" ") if isinstance(value, datetime.datetime) else value.isoformat()
        if isinstance(value, str):
            return "'" + value.replace("'", "''") + "'"
        raise DBError(f"Cannot use {value!r} as a default value")

    def column_definition(self, column: Column) -> str:
        """Column as it appears in CREATE TABLE (e.g. ``"email" VARCHAR(255) NOT NULL``)."""
        sql = f"{self.ident_quote(column.name)} {self.type_sql(column)}"
        sql += " NULL" if column.nullable else " NOT NULL"
        if column.default is not None:
            sql += " DEFAULT " + self.literal(column.default)
        return sql

    # tables

    def create_table(self, table: Table) -> list[str]:
        """CREATE TABLE, then indexes, then the serial column, then foreign keys."""
        if not table.columns:
            raise DBError(f"Table {table.name} has no columns")
        definitions = ",\n    ".join(self.column_definition(c) for c in table.columns.values())
        statements = [f"CREATE TABLE {self.ident_quote(table.name)} (\n    {definitions}\n){self._table_options()}"]
        for index in table.indexes:
            statements += self.create_index(table, index)
        if table.serial_column is not None:
            statements += self.create_serial(table, table.serial_column)
        for foreign_key in table.foreign_keys:
            statements += self.create_foreign_key(table, foreign_key)
        return statements

    def _table_options(self) -> str:
        return ""

    def drop_table(self, name: str, safe: bool = False) -> list[str]:
        """DROP TABLE; ``safe`` adds IF EXISTS."""
        return [f"DROP TABLE {'IF EXISTS ' if safe else ''}{self.ident_quote(name)}"]

    def add_column(self, table: Table, column: Column) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} ADD COLUMN {self.column_definition(column)}"]

    def remove_column(self, table: Table, column: Column) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} DROP COLUMN {self.ident_quote(column.name)}"]

    # indexes

    def _column_list(self, names: list[str]) -> str:
        return "(" + ", ".join(self.ident_quote(name) for name in names) + ")"

    def create_index(self, table: Table, index: Index) -> list[str]:
        columns = self._column_list(index.columns)
        if index.type is IndexType.PRIMARY:
            return [f"ALTER TABLE {self.ident_quote(table.name)} ADD PRIMARY KEY {columns}"]
        unique = "UNIQUE " if index.type is IndexType.UNIQUE else ""
        return [f"CREATE {unique}INDEX {self.ident_quote(index.name)} ON {self.ident_quote(table.name)} {columns}"]

    @abstractmethod
    def drop_index(self, table: Table, index: Index) -> list[str]:
        ...  # pylint: disable=unnecessary-ellipsis

    # foreign keys

    def foreign_key_definition(self, foreign_key: ForeignKey) -> str:
        """``CONSTRAINT name FOREIGN KEY (...) REFERENCES table (...) [ON UPDATE ...] [ON DELETE ...]``."""
        sql = (
            f"CONSTRAINT {self.ident_quote(foreign_key.name)}"
            f" FOREIGN KEY {self._column_list([c.name for c in foreign_key.columns])}"
            f" REFERENCES {self.ident_quote(foreign_key.referred_table.name)}"
            f" {self._column_list([c.name for c in foreign_key.referred_columns])}"
        )
        if foreign_key.on_update is not None:
            sql += f" ON UPDATE {foreign_key.on_update.value}"
        if foreign_key.on_delete is not None:
            sql += f" ON DELETE {foreign_key.on_delete.value}"
        return sql

    def create_foreign_key(self, table: Table, foreign_key: ForeignKey) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} ADD {self.foreign_key_definition(foreign_key)}"]

    @abstractmethod
    def drop_foreign_key(self, table: Table, foreign_key: ForeignKey) -> list[str]:
        ...  # pylint: disable=unnecessary-ellipsis

    # serial columns

    @abstractmethod
    def create_serial(self, table: Table, column: Column) -> list[str]:
        """Statements making ``column`` take its values from an auto-increment."""
        ...  # pylint: disable=unnecessary-ellipsis

    @abstractmethod
    def drop_serial(self, table: Table, column: Column) -> list[str]:
        ...  # pylint: disable=unnecessary-ellipsis
