"""WASP database layer: a SQL query builder, a schema model with per-dialect DDL,
a database handle with nested transactions, and per-module migrations."""

from .config import DatabaseConfig
from .database import Database
from .dialects import Dialect, MysqlDialect, PostgresDialect, SqliteDialect, get_dialect_for_scheme
from .errors import DBError, MigrationError, TableNotExists, TransactionError
from .migration import Migration
from .query import Q
from .schema import Column, ColumnType, ForeignKey, ForeignKeyAction, Index, IndexType, Table

__all__ = [
    "Column",
    "ColumnType",
    "Database",
    "DatabaseConfig",
    "DBError",
    "Dialect",
    "ForeignKey",
    "ForeignKeyAction",
    "Index",
    "IndexType",
    "Migration",
    "MigrationError",
    "MysqlDialect",
    "PostgresDialect",
    "Q",
    "SqliteDialect",
    "Table",
    "TableNotExists",
    "TransactionError",
    "get_dialect_for_scheme",
]
