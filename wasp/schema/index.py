"""Indexes: primary keys, unique and plain indexes."""

from __future__ import annotations

import enum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..errors import DBError
from .column import Column


class IndexType(str, enum.Enum):
    PRIMARY = "PRIMARY"
    UNIQUE = "UNIQUE"
    INDEX = "INDEX"


def _column_name(column: Any) -> str:
    if isinstance(column, Column):
        return column.name
    if isinstance(column, str) and column:
        return column
    raise DBError(f"Invalid column for index: {column!r}")


class Index(BaseModel):
    """Index over an ordered list of column names of one table.

    The name of a primary key is always ``PRIMARY``. Other indexes may be named
    explicitly (``name=...`` or :meth:`set_name`); otherwise the name is derived as
    ``<table>_<col1>_<col2>..._idx`` (``_uidx`` for unique indexes) on first access
    and cached. Adding a column or moving the index to another table clears the
    cached name, so it always matches the current definition.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: IndexType
    columns: list[str] = Field(default_factory=list)
    table: Optional[str] = None
    explicit_name: Optional[str] = Field(default=None, alias="name")

    _derived_name: Optional[str] = PrivateAttr(default=None)

    @field_validator("columns", mode="before")
    @classmethod
    def _coerce_columns(cls, columns: Any) -> list[str]:
        if isinstance(columns, (str, Column)):
            columns = [columns]
        try:
            return [_column_name(column) for column in columns]
        except DBError as error:
            raise ValueError(str(error)) from error

    @field_validator("table", mode="before")
    @classmethod
    def _coerce_table(cls, table: Any) -> Optional[str]:
        return getattr(table, "name", table)

    @property
    def name(self) -> str:
        if self.type is IndexType.PRIMARY:
            return "PRIMARY"
        if self.explicit_name is not None:
            return self.explicit_name
        if self._derived_name is None:
            if not self.table:
                raise DBError("Cannot name an index that does not belong to a table")
            if not self.columns:
                raise DBError("Cannot name an index without columns")
            suffix = "uidx" if self.type is IndexType.UNIQUE else "idx"
            self._derived_name = "_".join([self.table, *self.columns, suffix])
        return self._derived_name

    def set_name(self, name: str) -> Index:
        self.explicit_name = name
        return self

    def set_table(self, table: Any) -> Index:
        """Attach to a table, given as a :class:`Table` or a table name."""
        self.table = getattr(table, "name", table)
        self._derived_name = None
        return self

    def add_column(self, column: Column | str) -> Index:
        self.columns.append(_column_name(column))
        self._derived_name = None
        return self

    def add_columns(self, columns: Iterable[Column | str]) -> Index:
        names = [_column_name(column) for column in columns]
        self.columns.extend(names)
        self._derived_name = None
        return self

    def __eq__(self, other: object) -> bool:
        # the cached derived name is not part of the definition
        if not isinstance(other, Index):
            return NotImplemented
        return (
            self.type == other.type
            and self.columns == other.columns
            and self.table == other.table
            and self.explicit_name == other.explicit_name
        )


__all__ = ["Index", "IndexType"]
