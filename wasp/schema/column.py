"""Column definitions for the schema model."""

from __future__ import annotations

import enum
from typing import Any, Optional, TYPE_CHECKING

from pydantic import BaseModel, PrivateAttr

from ..errors import DBError

if TYPE_CHECKING:
    from .table import Table


class ColumnType(str, enum.Enum):
    """Portable column types; each dialect maps them to its own SQL type."""

    CHAR = "CHAR"
    VARCHAR = "VARCHAR"
    TEXT = "TEXT"
    JSON = "JSON"

    BOOLEAN = "BOOLEAN"
    SMALLINT = "SMALLINT"
    INT = "INT"
    BIGINT = "BIGINT"
    FLOAT = "FLOAT"
    DECIMAL = "DECIMAL"

    DATE = "DATE"
    DATETIME = "DATETIME"
    TIME = "TIME"

    BINARY = "BINARY"


INTEGER_TYPES = (ColumnType.SMALLINT, ColumnType.INT, ColumnType.BIGINT)


class Column(BaseModel):
    """One column of a :class:`Table`.

    A column belongs to at most one table; the table is set when the column is
    added with :meth:`Table.add_column` and is a back-reference, not ownership.
    A serial column gets its values from an auto-increment mechanism and must be
    of an integer type.
    """

    name: str
    type: ColumnType
    max_length: Optional[int] = None
    numeric_precision: Optional[int] = None
    numeric_scale: Optional[int] = None
    nullable: bool = True
    default: Any = None
    serial: bool = False

    _table: Any = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        if self.serial:
            self._check_serial()

    @property
    def table(self) -> Optional[Table]:
        """Table this column belongs to, or None while it is unattached."""
        return self._table

    def set_table(self, table: Table) -> Column:
        """Attach to ``table``; a table holds at most one serial column."""
        if self._table is not None and self._table is not table:
            raise DBError(f"Column {self.name} already belongs to table {self._table.name}")
        if self.serial:
            for other in table.columns.values():
                if other is not self and other.serial:
                    raise DBError("There can be only one serial column in a table")
        self._table = table
        return self

    def set_serial(self, serial: bool = True) -> Column:
        """Mark (or unmark) this column as auto-incremented."""
        if serial:
            self._check_serial()
            if self._table is not None:
                for other in self._table.columns.values():
                    if other is not self and other.serial:
                        raise DBError("There can be only one serial column in a table")
        self.serial = serial
        return self

    def set_default(self, default: Any) -> Column:
        self.default = default
        return self

    def _check_serial(self) -> None:
        if self.type not in INTEGER_TYPES:
            raise DBError("A serial column must be of type integer")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return (
            self._table is other._table
            and self.name == other.name
            and self.type == other.type
            and self.max_length == other.max_length
            and self.numeric_precision == other.numeric_precision
            and self.numeric_scale == other.numeric_scale
            and self.nullable == other.nullable
            and self.default == other.default
            and self.serial == other.serial
        )


__all__ = ["Column", "ColumnType", "INTEGER_TYPES"]
