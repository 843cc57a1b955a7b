"""Per-render context: bound values, tables in scope, and the dialect."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, TYPE_CHECKING

from ..errors import DBError

if TYPE_CHECKING:
    from ..dialects import Dialect
    from .table import TableClause


class Parameters:
    """Collects everything a render pass needs besides the tree itself.

    A fresh instance is created for every render and discarded once the SQL text
    and the bind values have been extracted; instances must not be shared between
    renders.
    """

    def __init__(self, dialect: Dialect):
        self.dialect = dialect
        self.values: dict[str, Any] = {}
        self.tables: dict[str, TableClause] = {}
        self.default_table: Optional[TableClause] = None
        self._counter = 0

    def assign(self, value: Any) -> str:
        """Bind ``value`` and return its new placeholder token.

        Every call allocates a new token, even for a value bound before.
        """
        self._counter += 1
        token = f"p{self._counter}"
        self.values[token] = value
        return token

    def placeholder(self, token: str) -> str:
        """Placeholder for ``token`` in the dialect's parameter style (e.g. ``:p1``)."""
        return self.dialect.placeholder(token)

    def ident_quote(self, name: str) -> str:
        """Quote an identifier the way the dialect does."""
        return self.dialect.ident_quote(name)

    def register_table(self, table: TableClause) -> None:
        """Record a table reference; the first clause seen for a reference name wins."""
        self.tables.setdefault(table.reference, table)

    def get_default_table(self) -> Optional[TableClause]:
        """Table used to qualify fields that do not name one.

        Returns None when no table is in scope. Raises :class:`DBError` when several
        tables are in scope but none was made the default, since guessing could
        silently produce a query on the wrong table.
        """
        if self.default_table is not None:
            return self.default_table
        if len(self.tables) > 1:
            raise DBError(
                "Cannot qualify field: no default table and several tables in scope ("
                + ", ".join(self.tables) + ")"
            )
        return None

    @contextmanager
    def scope(self, default_table: Optional[TableClause]) -> Iterator[Parameters]:
        """Render a (sub-)statement with its own tables; bound values stay shared."""
        saved = self.tables, self.default_table
        self.tables, self.default_table = {}, default_table
        try:
            yield self
        finally:
            self.tables, self.default_table = saved
