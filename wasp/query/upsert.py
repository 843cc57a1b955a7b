"""INSERT that updates the existing row on a key conflict."""

from typing import Optional

from pydantic import Field, model_validator

from .insert import Insert


class Upsert(Insert):
    """Insert one row, or update the row it conflicts with.

    ``conflict`` names the columns of the unique key that detects the existing
    row; they must be among the inserted values. ``update`` lists the columns
    overwritten with the new values, by default every inserted column outside
    the key. The conflict clause itself is dialect specific
    (``ON CONFLICT ... DO UPDATE`` or ``ON DUPLICATE KEY UPDATE``).
    """

    conflict: list[str] = Field(min_length=1)
    update: Optional[list[str]] = None

    @model_validator(mode="after")
    def _check_columns(self) -> "Upsert":
        missing = [column for column in self.conflict if column not in self.values]
        if missing:
            raise ValueError(f"Conflict columns must be inserted: {', '.join(missing)}")
        if self.update is None:
            self.update = [column for column in self.values if column not in self.conflict]
        unknown = [column for column in self.update if column not in self.values]
        if unknown:
            raise ValueError(f"Updated columns must be inserted: {', '.join(unknown)}")
        return self

    def to_sql(self, parameters, enclose: bool = False) -> str:
        sql = super().to_sql(parameters)
        return sql + " " + parameters.dialect.upsert_sql(self.conflict, self.update)
