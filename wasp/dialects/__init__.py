"""SQL dialects: one class per engine (SQLite, MySQL, PostgreSQL).

A dialect supplies identifier quoting and the placeholder style used when a
query is rendered, the DDL generated from the schema model, and the way to open
a driver connection.
"""

from .base import Dialect
from .mysql import MysqlDialect
from .postgres import PostgresDialect
from .sqlite import SqliteDialect

DIALECTS: dict[str, type[Dialect]] = {
    scheme: dialect_cls
    for dialect_cls in (SqliteDialect, MysqlDialect, PostgresDialect)
    for scheme in dialect_cls.SUPPORTED_SCHEMA
}
"""Dialect class for each supported URL scheme."""


def get_dialect_for_scheme(scheme: str) -> Dialect:
    """Return a Dialect for a URL scheme; a driver suffix is ignored (``postgresql+psycopg2``)."""
    try:
        return DIALECTS[(scheme or "").split("+")[0].lower()]()
    except KeyError as error:
        raise ValueError(f"Unsupported database scheme: {scheme}") from error


__all__ = [
    "DIALECTS",
    "Dialect",
    "MysqlDialect",
    "PostgresDialect",
    "SqliteDialect",
    "get_dialect_for_scheme",
]
