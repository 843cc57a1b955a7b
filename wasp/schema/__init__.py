"""Schema model: tables, columns, indexes and foreign keys, walked by dialects to emit DDL."""

from .column import Column, ColumnType, INTEGER_TYPES
from .foreign_key import ForeignKey, ForeignKeyAction
from .index import Index, IndexType
from .table import Table

__all__ = [
    "Column",
    "ColumnType",
    "ForeignKey",
    "ForeignKeyAction",
    "INTEGER_TYPES",
    "Index",
    "IndexType",
    "Table",
]
