"""Nested transactions on a per-thread connection, using SAVEPOINTs below the top level."""

import logging
import threading
from contextlib import contextmanager

from .errors import TransactionError

logger = logging.getLogger(__name__)


class TransactionManager:

    def __init__(self, connection_factory: callable, begin: callable = None):
        """
        Initialize the transaction manager.

        Args:
            connection_factory: A callable that returns a database connection
            begin: A callable starting a transaction on a connection, for drivers
                that do not begin one implicitly
        """
        self._connection_factory = connection_factory
        self._begin = begin
        self._local = threading.local()

    # get connection (built on first call)

    def get_connection(self):
        """Get or create a connection for the current thread"""
        if getattr(self._local, "connection", None) is None:
            self._local.connection = self._connection_factory()
        return self._local.connection

    def has_connection(self) -> bool:
        return getattr(self._local, "connection", None) is not None

    def close(self):
        """Close the connection of the current thread, if one was opened"""
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            if self.level:
                raise TransactionError("Cannot close a connection inside a transaction")
            connection.close()
            self._local.connection = None

    # transaction level

    @property
    def level(self) -> int:
        """Current transaction nesting level of this thread (0 outside transactions)"""
        return getattr(self._local, "transaction_level", 0)

    def _set_level(self, level: int):
        self._local.transaction_level = max(0, level)

    # actual transaction itself

    @contextmanager
    def transaction(self, database):
        """
        Context manager for database transactions with SAVEPOINT support.

        Yields:
            Transaction: Transaction object for executing statements
        """
        connection = self.get_connection()
        new_level = self.level + 1
        savepoint_name = f"savepoint_{new_level}" if new_level > 1 else None

        if savepoint_name:
            _run(connection, f"SAVEPOINT {savepoint_name}")
        elif self._begin is not None:
            self._begin(connection)
        logger.debug("Entered transaction level %d", new_level)
        self._set_level(new_level)

        transaction_obj = Transaction(database, self, new_level)
        try:
            with transaction_obj:
                yield transaction_obj
        except BaseException:
            self._set_level(new_level - 1)
            if savepoint_name:
                logger.debug("ROLLBACK TO SAVEPOINT %s", savepoint_name)
                _run(connection, f"ROLLBACK TO SAVEPOINT {savepoint_name}")
                _run(connection, f"RELEASE SAVEPOINT {savepoint_name}")
            else:
                logger.debug("ROLLBACK")
                connection.rollback()
            raise
        self._set_level(new_level - 1)
        if savepoint_name:
            logger.debug("RELEASE SAVEPOINT %s", savepoint_name)
            _run(connection, f"RELEASE SAVEPOINT {savepoint_name}")
        else:
            logger.debug("COMMIT")
            connection.commit()


def _run(connection, sql: str):
    cursor = connection.cursor()
    try:
        cursor.execute(sql)
    finally:
        cursor.close()


class Transaction:
    """Handle on one transaction level; statements run through its database."""

    def __init__(self, database, manager, level):
        self._database = database
        self._manager = manager
        self._level = level
        self._active = True

    @property
    def level(self) -> int:
        return self._level

    @property
    def active(self) -> bool:
        return self._active

    def execute(self, query, values=None):
        """
        Execute a statement within this transaction.

        Args:
            query: A statement from :mod:`wasp.query`, or SQL text
            values: Values bound to the placeholders of SQL text

        Returns:
            The driver cursor

        Raises:
            TransactionError: If the transaction is over, or a nested one is open
        """
        self._check()
        return self._database.execute(query, values)

    def fetch_all(self, query, values=None) -> list[dict]:
        self._check()
        return self._database.fetch_all(query, values)

    def _check(self):
        if not self._active:
            raise TransactionError("Transaction is no longer active")
        current_level = self._manager.level
        if current_level > self._level:
            raise TransactionError(
                f"Cannot use transaction level {self._level} from level {current_level}. "
                "Higher-level transactions cannot be accessed from nested transactions."
            )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._active = False


__all__ = ["Transaction", "TransactionManager"]
