"""Exceptions raised by the WASP database layer."""


class DBError(Exception):
    """Domain error of the schema model or the database layer."""


class TableNotExists(DBError):
    """Raised when a table that is required does not exist in the database."""


class TransactionError(DBError):
    """Raised when a transaction object is used outside of its own level."""


class MigrationError(DBError):
    """Raised when a module cannot be migrated to the requested version."""


__all__ = ["DBError", "TableNotExists", "TransactionError", "MigrationError"]
