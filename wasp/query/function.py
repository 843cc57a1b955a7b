"""SQL function call expression."""

import re
from typing import Any

from pydantic import Field, field_validator

from ._bases import Expression, to_expression

_FUNCTION_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FunctionExpression(Expression):
    """SQL function call: ``name(args...)`` (e.g. ``LOWER("t1"."name")``, ``COUNT(*)``)."""

    name: str
    arguments: list[Expression] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        if not _FUNCTION_NAME.match(name):
            raise ValueError(f"Invalid function name: {name!r}")
        return name

    @field_validator("arguments", mode="before")
    @classmethod
    def _coerce_arguments(cls, arguments: Any) -> list[Expression]:
        return [to_expression(argument) for argument in arguments]

    def register_tables(self, parameters) -> None:
        for argument in self.arguments:
            argument.register_tables(parameters)

    def to_sql(self, parameters, enclose: bool = False) -> str:
        arguments = ", ".join(argument.to_sql(parameters, False) for argument in self.arguments)
        return f"{self.name}({arguments})"
