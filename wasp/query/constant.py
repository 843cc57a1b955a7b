"""Literal values, bound as parameters."""

import datetime
import decimal
from typing import Any

from pydantic import field_validator

from ._bases import Expression

SCALAR_TYPES = (str, int, float, bool, bytes, decimal.Decimal,
                datetime.date, datetime.datetime, datetime.time)


def _validate_scalar(value: Any) -> Any:
    if value is not None and not isinstance(value, SCALAR_TYPES):
        raise ValueError(f"Invalid constant: {value!r} is not a scalar value")
    return value


class ConstantExpression(Expression):
    """A scalar literal. ``None`` renders as ``NULL`` and binds nothing."""

    value: Any = None

    @field_validator("value")
    @classmethod
    def _check_value(cls, value: Any) -> Any:
        return _validate_scalar(value)

    def is_null(self) -> bool:
        """True when this constant is SQL ``NULL``."""
        return self.value is None

    def to_sql(self, parameters, enclose: bool = False) -> str:
        if self.value is None:
            return "NULL"
        return parameters.placeholder(parameters.assign(self.value))


class ConstantArray(Expression):
    """A parenthesized list of literals, as used by ``IN (...)``."""

    values: list[Any]

    @field_validator("values")
    @classmethod
    def _check_values(cls, values: list[Any]) -> list[Any]:
        if not values:
            raise ValueError("A constant array needs at least one value")
        for value in values:
            _validate_scalar(value)
        return values

    def to_sql(self, parameters, enclose: bool = False) -> str:
        parts = [ConstantExpression(value=value).to_sql(parameters) for value in self.values]
        return "(" + ", ".join(parts) + ")"
