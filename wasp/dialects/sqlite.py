"""SQLite dialect."""

import logging
import re
import sqlite3
from typing import Any, ClassVar, Iterable, Mapping

from ..errors import DBError
from ..query import Q, Select
from ..schema import Column, ColumnType, ForeignKey, Index, IndexType, Table
from .base import Dialect

logger = logging.getLogger(__name__)

_TYPE_PATTERN = re.compile(r"^\s*([A-Za-z ]+?)\s*(?:\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\))?\s*$")


class SqliteDialect(Dialect):
    """Dialect for SQLite (scheme sqlite).

    SQLite cannot add constraints to an existing table, so :meth:`create_table`
    declares the primary key, the serial column and the foreign keys inline, and
    only indexes are created by separate statements. A serial column becomes
    ``INTEGER PRIMARY KEY AUTOINCREMENT`` and must be the whole primary key.
    """

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("sqlite", "sqlite3")

    TYPE_MAPPING: ClassVar[dict[ColumnType, str]] = {
        ColumnType.CHAR: "CHAR",
        ColumnType.VARCHAR: "VARCHAR",
        ColumnType.TEXT: "TEXT",
        ColumnType.JSON: "TEXT",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INT: "INTEGER",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.FLOAT: "REAL",
        ColumnType.DECIMAL: "NUMERIC",
        ColumnType.DATETIME: "DATETIME",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME",
        ColumnType.BINARY: "BLOB",
    }

    COLUMN_TYPES: ClassVar[dict[str, ColumnType]] = {
        "char": ColumnType.CHAR,
        "character": ColumnType.CHAR,
        "varchar": ColumnType.VARCHAR,
        "text": ColumnType.TEXT,
        "json": ColumnType.JSON,
        "boolean": ColumnType.BOOLEAN,
        "smallint": ColumnType.SMALLINT,
        "int": ColumnType.INT,
        "integer": ColumnType.INT,
        "bigint": ColumnType.BIGINT,
        "real": ColumnType.FLOAT,
        "float": ColumnType.FLOAT,
        "double": ColumnType.FLOAT,
        "numeric": ColumnType.DECIMAL,
        "decimal": ColumnType.DECIMAL,
        "datetime": ColumnType.DATETIME,
        "date": ColumnType.DATE,
        "time": ColumnType.TIME,
        "blob": ColumnType.BINARY,
    }

    UNBOUNDED_LIMIT: ClassVar[str] = "-1"

    def connect(self, config):
        path = config.database or ":memory:"
        logger.debug("Connecting to SQLite database %s", path)
        # transactions are started explicitly by begin()
        conn = sqlite3.connect(path, isolation_level=None, check_same_thread=False)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def begin(self, connection) -> None:
        if not connection.in_transaction:
            connection.execute("BEGIN")

    def table_exists_query(self, name: str) -> Select:
        return Q.select(
            "name",
            Q.from_("sqlite_master"),
            Q.where(Q.equals("type", "table"), Q.equals("name", name)),
        )

    def columns_query(self, name: str) -> str:
        return f"PRAGMA table_info({self.ident_quote(name)})"

    def columns_from_rows(self, rows: Iterable[Mapping[str, Any]]) -> list[Column]:
        """Columns from ``PRAGMA table_info`` rows.

        A lone INTEGER primary key is an alias of the rowid, which SQLite assigns
        itself, so it is reported as serial.
        """
        rows = list(rows)
        primary = [row for row in rows if row["pk"]]
        columns = []
        for row in rows:
            match = _TYPE_PATTERN.match(row["type"] or "")
            if match is None:
                raise DBError(f"Unsupported column type: {row['type']}")
            data_type, first, second = match.groups()
            serial = len(primary) == 1 and bool(row["pk"]) and data_type.upper() == "INTEGER"
            columns.append(self.column_from_row({
                "name": row["name"],
                "data_type": data_type,
                "max_length": int(first) if first else None,
                "numeric_precision": int(first) if first else None,
                "numeric_scale": int(second) if second else None,
                "is_nullable": "NO" if row["notnull"] or serial else "YES",
                "default": row["dflt_value"],
                "serial": serial,
            }))
        return columns

    def is_serial(self, row: Mapping[str, Any]) -> bool:
        return row["serial"]

    def column_definition(self, column: Column) -> str:
        if column.serial:
            return f"{self.ident_quote(column.name)} INTEGER PRIMARY KEY AUTOINCREMENT"
        return super().column_definition(column)

    def create_table(self, table: Table) -> list[str]:
        if not table.columns:
            raise DBError(f"Table {table.name} has no columns")
        serial = table.serial_column
        primary = table.primary_key
        definitions = [self.column_definition(column) for column in table.columns.values()]
        if serial is not None:
            if primary is not None and primary.columns != [serial.name]:
                raise DBError(f"Serial column {serial.name} must be the primary key of {table.name}")
        elif primary is not None:
            definitions.append("PRIMARY KEY " + self._column_list(primary.columns))
        definitions += [self.foreign_key_definition(foreign_key) for foreign_key in table.foreign_keys]

        statements = [f"CREATE TABLE {self.ident_quote(table.name)} (\n    " + ",\n    ".join(definitions) + "\n)"]
        for index in table.indexes:
            if index.type is not IndexType.PRIMARY:
                statements += self.create_index(table, index)
        return statements

    def create_index(self, table: Table, index: Index) -> list[str]:
        if index.type is IndexType.PRIMARY:
            raise DBError("SQLite cannot add a primary key to an existing table")
        return super().create_index(table, index)

    def drop_index(self, table: Table, index: Index) -> list[str]:
        if index.type is IndexType.PRIMARY:
            raise DBError("SQLite cannot drop the primary key of a table")
        return [f"DROP INDEX {self.ident_quote(index.name)}"]

    def create_foreign_key(self, table: Table, foreign_key: ForeignKey) -> list[str]:
        raise DBError("SQLite cannot add a foreign key to an existing table")

    def drop_foreign_key(self, table: Table, foreign_key: ForeignKey) -> list[str]:
        raise DBError("SQLite cannot drop a foreign key from an existing table")

    def create_serial(self, table: Table, column: Column) -> list[str]:
        raise DBError("SQLite cannot make an existing column auto-increment")

    def drop_serial(self, table: Table, column: Column) -> list[str]:
        raise DBError("SQLite cannot remove auto-increment from an existing column")
