"""MySQL dialect."""

from typing import Any, ClassVar, Mapping

from ..query import Q, Select, SourceTableClause
from ..schema import Column, ColumnType, ForeignKey, Index, IndexType, Table
from .base import Dialect


class MysqlDialect(Dialect):
    """Dialect for MySQL and MariaDB (scheme mysql), driven by PyMySQL."""

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("mysql", "mariadb")
    IDENT_QUOTE: ClassVar[str] = "`"
    PARAMSTYLE: ClassVar[str] = "pyformat"

    TYPE_MAPPING: ClassVar[dict[ColumnType, str]] = {
        ColumnType.CHAR: "CHAR",
        ColumnType.VARCHAR: "VARCHAR",
        ColumnType.TEXT: "MEDIUMTEXT",
        ColumnType.JSON: "MEDIUMTEXT",
        ColumnType.BOOLEAN: "TINYINT(1)",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INT: "INT",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.FLOAT: "FLOAT",
        ColumnType.DECIMAL: "DECIMAL",
        ColumnType.DATETIME: "DATETIME",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME",
        ColumnType.BINARY: "MEDIUMBLOB",
    }

    COLUMN_TYPES: ClassVar[dict[str, ColumnType]] = {
        "char": ColumnType.CHAR,
        "varchar": ColumnType.VARCHAR,
        "tinytext": ColumnType.TEXT,
        "text": ColumnType.TEXT,
        "mediumtext": ColumnType.TEXT,
        "longtext": ColumnType.TEXT,
        "json": ColumnType.JSON,
        "tinyint": ColumnType.SMALLINT,
        "smallint": ColumnType.SMALLINT,
        "mediumint": ColumnType.INT,
        "int": ColumnType.INT,
        "integer": ColumnType.INT,
        "bigint": ColumnType.BIGINT,
        "float": ColumnType.FLOAT,
        "double": ColumnType.FLOAT,
        "decimal": ColumnType.DECIMAL,
        "datetime": ColumnType.DATETIME,
        "timestamp": ColumnType.DATETIME,
        "date": ColumnType.DATE,
        "time": ColumnType.TIME,
        "binary": ColumnType.BINARY,
        "varbinary": ColumnType.BINARY,
        "blob": ColumnType.BINARY,
        "mediumblob": ColumnType.BINARY,
        "longblob": ColumnType.BINARY,
    }

    # largest BIGINT UNSIGNED
    UNBOUNDED_LIMIT: ClassVar[str] = "18446744073709551615"

    def connect(self, config):
        import pymysql  # pylint: disable=import-outside-toplevel,import-error
        return pymysql.connect(
            host=config.hostname,
            user=config.username,
            password=config.password or "",
            database=config.database,
            port=config.port or 3306,
        )

    def begin(self, connection) -> None:
        connection.begin()

    def table_exists_query(self, name: str) -> Select:
        return Q.select(
            "table_name",
            SourceTableClause(name="tables", schema_name="information_schema"),
            Q.where(Q.equals("table_schema", Q.func("DATABASE")), Q.equals("table_name", name)),
        )

    def upsert_sql(self, conflict: list[str], update: list[str]) -> str:
        # with nothing to update, assigning a key column to itself keeps the row
        columns = update or conflict[:1]
        assignments = ", ".join(f"{self.ident_quote(c)} = VALUES({self.ident_quote(c)})" for c in columns)
        return f"ON DUPLICATE KEY UPDATE {assignments}"

    def columns_query(self, name: str) -> Select:
        # MySQL 8 reports information_schema column names in upper case
        return Q.select(
            Q.alias("column_name", "name"),
            Q.alias("data_type", "data_type"),
            Q.alias("column_type", "column_type"),
            Q.alias("character_maximum_length", "max_length"),
            Q.alias("numeric_precision", "numeric_precision"),
            Q.alias("numeric_scale", "numeric_scale"),
            Q.alias("is_nullable", "is_nullable"),
            Q.alias("column_default", "default"),
            Q.alias("extra", "extra"),
            SourceTableClause(name="columns", schema_name="information_schema"),
            Q.where(Q.equals("table_schema", Q.func("DATABASE")), Q.equals("table_name", name)),
            Q.order("ordinal_position"),
        )

    def column_type(self, row: Mapping[str, Any]) -> ColumnType:
        if str(row["column_type"]).lower() == "tinyint(1)":
            return ColumnType.BOOLEAN
        return super().column_type(row)

    def is_serial(self, row: Mapping[str, Any]) -> bool:
        return "auto_increment" in str(row["extra"] or "").lower()

    def _table_options(self) -> str:
        return " ENGINE=InnoDB"

    def drop_index(self, table: Table, index: Index) -> list[str]:
        if index.type is IndexType.PRIMARY:
            return [f"ALTER TABLE {self.ident_quote(table.name)} DROP PRIMARY KEY"]
        return [f"DROP INDEX {self.ident_quote(index.name)} ON {self.ident_quote(table.name)}"]

    def drop_foreign_key(self, table: Table, foreign_key: ForeignKey) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} DROP FOREIGN KEY {self.ident_quote(foreign_key.name)}"]

    def create_serial(self, table: Table, column: Column) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} MODIFY {self.column_definition(column)} AUTO_INCREMENT"]

    def drop_serial(self, table: Table, column: Column) -> list[str]:
        return [f"ALTER TABLE {self.ident_quote(table.name)} MODIFY {self.column_definition(column)}"]
