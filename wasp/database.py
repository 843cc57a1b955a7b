"""Database handle: one configured connection, statement execution and DDL."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from .config import DatabaseConfig
from .dialects import Dialect, get_dialect_for_scheme
from .errors import DBError, TableNotExists
from .query import Statement
from .schema import Column, Table
from .transaction import TransactionManager

logger = logging.getLogger(__name__)


class Database:
    """Connection to one database, opened on first use.

    Built from a :class:`DatabaseConfig`, a URL, or a settings mapping::

        db = Database("sqlite:////var/lib/app/app.db")
        db.execute(Q.insert("users", {"name": "Alice"}))
        db.execute(Q.upsert("users", {"id": 1, "name": "Alicia"}, conflict=["id"]))
        rows = db.fetch_all(Q.select("id", "name", Q.from_("users")))

    Outside of :meth:`transaction`, every statement is committed as soon as it
    has run. Each thread gets its own connection.
    """

    def __init__(self, config: DatabaseConfig | str | Mapping[str, Any]):
        if isinstance(config, str):
            config = DatabaseConfig.from_url(config)
        elif isinstance(config, Mapping):
            config = DatabaseConfig.from_mapping(config)
        elif not isinstance(config, DatabaseConfig):
            raise DBError(f"Invalid database configuration: {config!r}")
        self.config = config
        self.dialect: Dialect = get_dialect_for_scheme(config.scheme)
        self._transactions = TransactionManager(self._connect, begin=self.dialect.begin)
        if not config.lazy:
            self.connect()

    @classmethod
    def from_ini(cls, path: str, section: str = "sql") -> Database:
        return cls(DatabaseConfig.from_ini(path, section))

    def _connect(self):
        logger.info("Connecting to %s database %s", self.config.scheme, self.config.database)
        return self.dialect.connect(self.config)

    def connect(self) -> Database:
        """Open the connection now instead of on first use."""
        self._transactions.get_connection()
        return self

    @property
    def connection(self):
        """Raw driver connection of the current thread."""
        return self._transactions.get_connection()

    @property
    def connected(self) -> bool:
        return self._transactions.has_connection()

    @property
    def in_transaction(self) -> bool:
        return self._transactions.level > 0

    def close(self) -> None:
        self._transactions.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # statements

    def compile(self, query: Statement | str, values: Optional[Mapping[str, Any]] = None) -> tuple[str, dict[str, Any]]:
        """SQL text and bound values for a statement, or for SQL text with its values."""
        if isinstance(query, Statement):
            if values:
                raise DBError("Values cannot be passed along with a statement")
            compiled = query.render(self.dialect)
            return compiled.sql, compiled.values
        if isinstance(query, str):
            return query, dict(values or {})
        raise DBError(f"Cannot execute {query!r}")

    def execute(self, query: Statement | str, values: Optional[Mapping[str, Any]] = None):
        """Run a statement and return the driver cursor."""
        sql, values = self.compile(query, values)
        logger.debug("Executing %s with %r", sql, values)
        connection = self.connection
        cursor = connection.cursor()
        try:
            if values:
                cursor.execute(sql, values)
            else:
                cursor.execute(sql)
        except Exception:
            cursor.close()
            if not self.in_transaction:
                connection.rollback()
            raise
        if not self.in_transaction:
            connection.commit()
        return cursor

    def fetch_all(self, query: Statement | str, values: Optional[Mapping[str, Any]] = None) -> list[dict[str, Any]]:
        """Rows of a query, as dicts keyed by column name."""
        cursor = self.execute(query, values)
        try:
            columns = [description[0] for description in cursor.description or ()]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def fetch_one(self, query: Statement | str, values: Optional[Mapping[str, Any]] = None) -> Optional[dict[str, Any]]:
        rows = self.fetch_all(query, values)
        return rows[0] if rows else None

    def transaction(self):
        """Context manager running its block in a transaction (a savepoint when nested)."""
        return self._transactions.transaction(self)

    # schema

    def execute_ddl(self, statements: Iterable[str]) -> None:
        """Run statements generated by the dialect's ``create_*`` / ``drop_*`` methods."""
        for sql in statements:
            logger.info("%s", sql)
            self.execute(sql).close()

    def table_exists(self, name: str) -> bool:
        return self.fetch_one(self.dialect.table_exists_query(name)) is not None

    def get_columns(self, name: str) -> list[Column]:
        """Columns of an existing table, as reported by the database, in table order."""
        rows = self.fetch_all(self.dialect.columns_query(name))
        if not rows:
            raise TableNotExists(f"Table {name} does not exist")
        return self.dialect.columns_from_rows(rows)

    def create_table(self, table: Table) -> Database:
        self.execute_ddl(self.dialect.create_table(table))
        return self

    def drop_table(self, name: str | Table, safe: bool = False) -> Database:
        """Drop a table; unless ``safe``, a missing table raises :class:`TableNotExists`."""
        name = getattr(name, "name", name)
        if not safe and not self.table_exists(name):
            raise TableNotExists(f"Table {name} does not exist")
        self.execute_ddl(self.dialect.drop_table(name, safe))
        return self


__all__ = ["Database"]
