"""Table definitions: columns, indexes and foreign keys in DDL order."""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from ..errors import DBError
from .column import Column
from .foreign_key import ForeignKey
from .index import Index, IndexType


class Table(BaseModel):
    """Structure of one table, assembled with chainable ``add_*`` calls::

        users = (
            Table(name="users")
            .add_column(Column(name="id", type=ColumnType.INT, nullable=False, serial=True))
            .add_column(Column(name="email", type=ColumnType.VARCHAR, max_length=255))
            .add_index(Index(type=IndexType.PRIMARY, columns=["id"]))
        )

    Columns keep their insertion order, which is the column order of the
    generated ``CREATE TABLE``.
    """

    name: str
    columns: dict[str, Column] = Field(default_factory=dict)
    indexes: list[Index] = Field(default_factory=list)
    foreign_keys: list[ForeignKey] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        if not name:
            raise ValueError("Invalid table: empty name")
        return name

    def model_post_init(self, __context) -> None:
        columns, self.columns = self.columns, {}
        indexes, self.indexes = self.indexes, []
        foreign_keys, self.foreign_keys = self.foreign_keys, []
        self.add_columns(columns.values())
        for index in indexes:
            self.add_index(index)
        for foreign_key in foreign_keys:
            self.add_foreign_key(foreign_key)

    def add_column(self, column: Column) -> Table:
        if not isinstance(column, Column):
            raise DBError(f"Invalid column: {column!r}")
        if column.name in self.columns:
            raise DBError(f"Duplicate column {column.name} in table {self.name}")
        column.set_table(self)
        self.columns[column.name] = column
        return self

    def add_columns(self, columns: Iterable[Column]) -> Table:
        for column in columns:
            self.add_column(column)
        return self

    def get_column(self, name: str) -> Column:
        try:
            return self.columns[name]
        except KeyError as error:
            raise DBError(f"Table {self.name} has no column {name}") from error

    def add_index(self, index: Index) -> Table:
        """Attach ``index``; its columns must exist, and there is at most one primary key."""
        if not isinstance(index, Index):
            raise DBError(f"Invalid index: {index!r}")
        if index.type is IndexType.PRIMARY and self.primary_key is not None:
            raise DBError(f"Table {self.name} already has a primary key")
        for name in index.columns:
            self.get_column(name)
        index.set_table(self)
        self.indexes.append(index)
        return self

    def add_foreign_key(self, foreign_key: ForeignKey) -> Table:
        """Attach ``foreign_key``; its referring columns must belong to this table."""
        if not isinstance(foreign_key, ForeignKey):
            raise DBError(f"Invalid foreign key: {foreign_key!r}")
        if foreign_key.table is not self:
            raise DBError(f"Foreign key columns do not belong to table {self.name}")
        if foreign_key.referred_table is None:
            raise DBError("Foreign key does not refer to any column")
        if len(foreign_key.referred_columns) != len(foreign_key.columns):
            raise DBError("Foreign key must refer to as many columns as it has")
        self.foreign_keys.append(foreign_key)
        return self

    @property
    def primary_key(self) -> Optional[Index]:
        for index in self.indexes:
            if index.type is IndexType.PRIMARY:
                return index
        return None

    @property
    def serial_column(self) -> Optional[Column]:
        for column in self.columns.values():
            if column.serial:
                return column
        return None


__all__ = ["Table"]
