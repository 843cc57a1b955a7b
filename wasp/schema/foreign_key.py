"""Foreign key constraints."""

from __future__ import annotations

import enum
from typing import Any, Iterable, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..errors import DBError
from .column import Column

if TYPE_CHECKING:
    from .table import Table


class ForeignKeyAction(str, enum.Enum):
    """Referential action for ON UPDATE / ON DELETE; the value is the SQL text."""

    CASCADE = "CASCADE"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    NO_ACTION = "NO ACTION"


def _table_of(columns: list[Column], current: Optional[Table], role: str) -> Table:
    """Return the one table all ``columns`` belong to (and ``current``, when set)."""
    if not columns:
        raise DBError(f"At least one {role} column is needed")
    table = current
    for column in columns:
        if not isinstance(column, Column):
            raise DBError(f"Invalid column: {column!r}")
        if column.table is None:
            raise DBError(f"Column {column.name} does not belong to a table")
        if table is not None and column.table is not table:
            raise DBError(f"All {role} columns must be in the same table")
        table = column.table
    return table


class ForeignKey(BaseModel):
    """Constraint from ``columns`` of one table to ``referred_columns`` of another.

    Columns must already be attached to their tables. All referring columns share
    one table, and all referred columns share one table; a call that would mix
    tables fails with :class:`DBError` and leaves the key unchanged. Without an
    explicit name, the key is named ``<table>_<col1>_<col2>..._fkey``.
    """

    model_config = ConfigDict(populate_by_name=True)

    columns: list[Column] = Field(default_factory=list)
    referred_columns: list[Column] = Field(default_factory=list)
    on_update: Optional[ForeignKeyAction] = None
    on_delete: Optional[ForeignKeyAction] = None
    explicit_name: Optional[str] = Field(default=None, alias="name")

    _table: Any = PrivateAttr(default=None)
    _referred_table: Any = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        columns, self.columns = self.columns, []
        referred, self.referred_columns = self.referred_columns, []
        if columns:
            self.set_referring_columns(columns)
        if referred:
            self.set_referred_columns(referred)

    @property
    def table(self) -> Optional[Table]:
        """Table holding the referring columns."""
        return self._table

    @property
    def referred_table(self) -> Optional[Table]:
        return self._referred_table

    @property
    def name(self) -> str:
        if self.explicit_name is not None:
            return self.explicit_name
        if self._table is None:
            raise DBError("Cannot name a foreign key without referring columns")
        return "_".join([self._table.name, *(column.name for column in self.columns), "fkey"])

    def set_name(self, name: str) -> ForeignKey:
        self.explicit_name = name
        return self

    def set_referring_columns(self, columns: Iterable[Column]) -> ForeignKey:
        """Add referring columns; they must all belong to the same table."""
        columns = list(columns)
        self._table = _table_of(columns, self._table, "referring")
        self.columns.extend(columns)
        return self

    def add_referring_column(self, column: Column) -> ForeignKey:
        return self.set_referring_columns([column])

    def set_referred_columns(self, columns: Iterable[Column]) -> ForeignKey:
        """Add referred columns; they must all belong to the same table."""
        columns = list(columns)
        self._referred_table = _table_of(columns, self._referred_table, "referred")
        self.referred_columns.extend(columns)
        return self

    def add_referred_column(self, column: Column) -> ForeignKey:
        return self.set_referred_columns([column])

    def set_on_update(self, action: ForeignKeyAction | str | None) -> ForeignKey:
        self.on_update = self._action(action, "update")
        return self

    def set_on_delete(self, action: ForeignKeyAction | str | None) -> ForeignKey:
        self.on_delete = self._action(action, "delete")
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ForeignKey):
            return NotImplemented
        return (
            self._table is other._table
            and self._referred_table is other._referred_table
            and self.columns == other.columns
            and self.referred_columns == other.referred_columns
            and self.on_update == other.on_update
            and self.on_delete == other.on_delete
            and self.explicit_name == other.explicit_name
        )

    @staticmethod
    def _action(action: Any, event: str) -> Optional[ForeignKeyAction]:
        if action is None:
            return None
        try:
            return ForeignKeyAction(action.upper() if isinstance(action, str) else action)
        except ValueError as error:
            raise DBError(f"Invalid on {event} policy: {action}") from error


__all__ = ["ForeignKey", "ForeignKeyAction"]
