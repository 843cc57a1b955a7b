"""PostgreSQL dialect."""

from typing import Any, ClassVar, Mapping

from ..query import Q, Select, SourceTableClause
from ..schema import Column, ColumnType, ForeignKey, Index, IndexType, Table
from .base import Dialect


class PostgresDialect(Dialect):
    """Dialect for PostgreSQL (scheme postgresql), driven by psycopg2.

    Serial columns use an explicit sequence named ``<table>_<column>_seq``, owned
    by the column so that dropping the table drops the sequence too.
    """

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("postgresql", "postgres", "pgsql")
    PARAMSTYLE: ClassVar[str] = "pyformat"

    TYPE_MAPPING: ClassVar[dict[ColumnType, str]] = {
        ColumnType.CHAR: "CHARACTER",
        ColumnType.VARCHAR: "CHARACTER VARYING",
        ColumnType.TEXT: "TEXT",
        ColumnType.JSON: "JSON",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INT: "INTEGER",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.FLOAT: "DOUBLE PRECISION",
        ColumnType.DECIMAL: "NUMERIC",
        ColumnType.DATETIME: "TIMESTAMP WITHOUT TIME ZONE",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME WITHOUT TIME ZONE",
        ColumnType.BINARY: "BYTEA",
    }

    COLUMN_TYPES: ClassVar[dict[str, ColumnType]] = {
        "character": ColumnType.CHAR,
        "character varying": ColumnType.VARCHAR,
        "text": ColumnType.TEXT,
        "json": ColumnType.JSON,
        "jsonb": ColumnType.JSON,
        "boolean": ColumnType.BOOLEAN,
        "smallint": ColumnType.SMALLINT,
        "integer": ColumnType.INT,
        "bigint": ColumnType.BIGINT,
        "real": ColumnType.FLOAT,
        "double precision": ColumnType.FLOAT,
        "numeric": ColumnType.DECIMAL,
        "timestamp without time zone": ColumnType.DATETIME,
        "timestamp with time zone": ColumnType.DATETIME,
        "date": ColumnType.DATE,
        "time without time zone": ColumnType.TIME,
        "bytea": ColumnType.BINARY,
    }

    def connect(self, config):
        import psycopg2  # pylint: disable=import-outside-toplevel,import-error
        return psycopg2.connect(
            host=config.hostname,
            user=config.username,
            password=config.password,
            dbname=config.database,
            port=config.port,
        )

    def table_exists_query(self, name: str) -> Select:
        return Q.select(
            "table_name",
            SourceTableClause(name="tables", schema_name="information_schema"),
            Q.where(Q.equals("table_schema", Q.func("current_schema")), Q.equals("table_name", name)),
        )

    def columns_query(self, name: str) -> Select:
        return Q.select(
            Q.alias("column_name", "name"),
            "data_type",
            Q.alias("character_maximum_length", "max_length"),
            "numeric_precision",
            "numeric_scale",
            "is_nullable",
            Q.alias("column_default", "default"),
            SourceTableClause(name="columns", schema_name="information_schema"),
            Q.where(Q.equals("table_schema", Q.func("current_schema")), Q.equals("table_name", name)),
            Q.order("ordinal_position"),
        )

    def is_serial(self, row: Mapping[str, Any]) -> bool:
        return str(row["default"] or "").startswith("nextval(")

    def literal(self, value: Any) -> str:
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        return super().literal(value)

    @staticmethod
    def sequence_name(table: Table, column: Column) -> str:
        return f"{table.name}_{column.name}_seq"

    def drop_index(self, table: Table, index: Index) -> list[str]:
        if index.type is IndexType.PRIMARY:
            return [f"ALTER TABLE {self.ident_quote(table.name)} DROP CONSTRAINT {self.ident_quote(table.name + '_pkey')}"]
        return [f"DROP INDEX {self.ident_quote(index.name)}"]

    def drop_foreign_key(self, table: Table, foreign_key: ForeignKey) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} DROP CONSTRAINT {self.ident_quote(foreign_key.name)}"]

    def create_serial(self, table: Table, column: Column) -> list[str]:
        sequence = self.ident_quote(self.sequence_name(table, column))
        quoted_table, quoted_column = self.ident_quote(table.name), self.ident_quote(column.name)
        return [
            f"CREATE SEQUENCE {sequence}",
            f"ALTER TABLE {quoted_table} ALTER COLUMN {quoted_column} SET DEFAULT nextval('{self.sequence_name(table, column)}')",
            f"ALTER SEQUENCE {sequence} OWNED BY {quoted_table}.{quoted_column}",
        ]

    def drop_serial(self, table: Table, column: Column) -> list[str]:
        return [
            f"ALTER TABLE {self.ident_quote(table.name)} ALTER COLUMN {self.ident_quote(column.name)} DROP DEFAULT",
            f"DROP SEQUENCE IF EXISTS {self.ident_quote(self.sequence_name(table, column))}",
        ]
