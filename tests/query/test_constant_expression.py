"""Tests for wasp.query.constant: bound constants, NULL, and constant arrays."""

import datetime
from unittest.mock import Mock

import pytest

from wasp.query import ConstantArray, ConstantExpression, Parameters


def test_constant_is_bound_through_parameters():
    parameters = Mock(spec=Parameters)
    parameters.assign.return_value = "p1"
    parameters.placeholder.return_value = ":p1"
    constant = ConstantExpression(value=42)
    assert constant.to_sql(parameters) == ":p1"
    parameters.assign.assert_called_once_with(42)
    parameters.placeholder.assert_called_once_with("p1")


@pytest.mark.parametrize("value", [
    "foo", 0, 3, -1.5, True, b"\x00\x01", datetime.date(2020, 1, 31),
])
def test_constant_registers_value_unchanged(sqlite, value):
    parameters = Parameters(sqlite)
    sql = ConstantExpression(value=value).to_sql(parameters)
    assert sql == ":p1"
    assert parameters.values == {"p1": value}


def test_equal_constants_get_distinct_placeholders(sqlite):
    parameters = Parameters(sqlite)
    first = ConstantExpression(value="same").to_sql(parameters)
    second = ConstantExpression(value="same").to_sql(parameters)
    assert first != second
    assert parameters.values == {"p1": "same", "p2": "same"}


def test_rendering_the_same_constant_twice_binds_twice(sqlite):
    parameters = Parameters(sqlite)
    constant = ConstantExpression(value=7)
    assert constant.to_sql(parameters) == ":p1"
    assert constant.to_sql(parameters) == ":p2"
    assert len(parameters.values) == 2


def test_null_constant_renders_null_without_binding():
    parameters = Mock(spec=Parameters)
    constant = ConstantExpression(value=None)
    assert constant.is_null() is True
    assert constant.to_sql(parameters) == "NULL"
    parameters.assign.assert_not_called()


def test_non_null_constant_is_not_null():
    assert ConstantExpression(value=0).is_null() is False
    assert ConstantExpression(value="").is_null() is False


def test_non_scalar_constant_is_rejected():
    with pytest.raises(ValueError, match="Invalid constant"):
        ConstantExpression(value={"a": 1})


def test_placeholder_follows_dialect(mysql):
    parameters = Parameters(mysql)
    assert ConstantExpression(value="x").to_sql(parameters) == "%(p1)s"


def test_constant_array_binds_each_value(sqlite):
    parameters = Parameters(sqlite)
    array = ConstantArray(values=[1, 2, None])
    assert array.to_sql(parameters) == "(:p1, :p2, NULL)"
    assert parameters.values == {"p1": 1, "p2": 2}


def test_empty_constant_array_is_rejected():
    with pytest.raises(ValueError, match="at least one value"):
        ConstantArray(values=[])
