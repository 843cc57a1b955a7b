"""Tests for wasp.dialects: scheme lookup, quoting, placeholders, table lookup queries and
column introspection."""

import pytest

from wasp.config import DatabaseConfig
from wasp.dialects import Dialect, MysqlDialect, PostgresDialect, SqliteDialect, get_dialect_for_scheme
from wasp.errors import DBError
from wasp.schema import ColumnType


@pytest.mark.parametrize("scheme, dialect_class", [
    ("sqlite", SqliteDialect),
    ("SQLITE", SqliteDialect),
    ("mysql", MysqlDialect),
    ("mysql+pymysql", MysqlDialect),
    ("postgresql", PostgresDialect),
    ("postgresql+psycopg2", PostgresDialect),
    ("pgsql", PostgresDialect),
])
def test_get_dialect_for_scheme(scheme, dialect_class):
    assert isinstance(get_dialect_for_scheme(scheme), dialect_class)


def test_get_dialect_for_unknown_scheme_raises():
    with pytest.raises(ValueError, match="Unsupported database scheme"):
        get_dialect_for_scheme("oracle")


def test_dialect_is_abstract():
    with pytest.raises(TypeError):
        Dialect()


def test_ident_quote(sqlite, mysql, postgres):
    assert sqlite.ident_quote("users") == '"users"'
    assert postgres.ident_quote('a"b') == '"a""b"'
    assert mysql.ident_quote("a`b") == "`a``b`"


def test_placeholder(sqlite, mysql, postgres):
    assert sqlite.placeholder("p1") == ":p1"
    assert mysql.placeholder("p1") == "%(p1)s"
    assert postgres.placeholder("p2") == "%(p2)s"


def test_sqlite_table_exists_query(sqlite):
    compiled = sqlite.table_exists_query("users").render(sqlite)
    assert compiled.sql == (
        'SELECT "sqlite_master"."name" FROM "sqlite_master"'
        ' WHERE ("sqlite_master"."type" = :p1) AND ("sqlite_master"."name" = :p2)'
    )
    assert compiled.values == {"p1": "table", "p2": "users"}


def test_mysql_table_exists_query(mysql):
    compiled = mysql.table_exists_query("users").render(mysql)
    assert compiled.sql == (
        "SELECT `information_schema`.`tables`.`table_name` FROM `information_schema`.`tables`"
        " WHERE (`information_schema`.`tables`.`table_schema` = DATABASE())"
        " AND (`information_schema`.`tables`.`table_name` = %(p1)s)"
    )
    assert compiled.values == {"p1": "users"}


def test_postgres_table_exists_query(postgres):
    compiled = postgres.table_exists_query("users").render(postgres)
    assert "current_schema()" in compiled.sql
    assert compiled.values == {"p1": "users"}


def test_columns_query_orders_by_position(mysql, postgres):
    compiled = mysql.columns_query("users").render(mysql)
    assert compiled.sql.startswith("SELECT `information_schema`.`columns`.`column_name` AS `name`")
    assert compiled.sql.endswith("ORDER BY `information_schema`.`columns`.`ordinal_position` ASC")
    assert compiled.values == {"p1": "users"}
    assert "current_schema()" in postgres.columns_query("users").render(postgres).sql


def test_sqlite_columns_query(sqlite):
    assert sqlite.columns_query('we"ird') == 'PRAGMA table_info("we""ird")'


def test_mysql_column_from_row(mysql):
    row = {
        "name": "id", "data_type": "int", "column_type": "int(11)", "max_length": None,
        "numeric_precision": 10, "numeric_scale": 0, "is_nullable": "NO", "default": None,
        "extra": "auto_increment",
    }
    column = mysql.column_from_row(row)
    assert (column.name, column.type, column.nullable, column.serial) == ("id", ColumnType.INT, False, True)
    assert column.numeric_precision is None

    flag = mysql.column_from_row({**row, "name": "active", "data_type": "tinyint", "column_type": "tinyint(1)",
                                  "is_nullable": "YES", "default": "0", "extra": ""})
    assert (flag.type, flag.nullable, flag.default, flag.serial) == (ColumnType.BOOLEAN, True, "0", False)


def test_postgres_column_from_row(postgres):
    row = {
        "name": "price", "data_type": "numeric", "max_length": None, "numeric_precision": 10,
        "numeric_scale": 2, "is_nullable": "YES", "default": None,
    }
    column = postgres.column_from_row(row)
    assert (column.type, column.numeric_precision, column.numeric_scale) == (ColumnType.DECIMAL, 10, 2)

    serial = postgres.column_from_row({**row, "name": "id", "data_type": "integer", "is_nullable": "NO",
                                       "default": "nextval('users_id_seq'::regclass)"})
    assert (serial.type, serial.serial, serial.default) == (ColumnType.INT, True, None)

    label = postgres.column_from_row({**row, "name": "label", "data_type": "character varying", "max_length": 32})
    assert (label.type, label.max_length) == (ColumnType.VARCHAR, 32)


def test_unknown_column_type_raises(postgres):
    with pytest.raises(DBError, match="Unsupported column type: point"):
        postgres.column_from_row({"name": "p", "data_type": "point", "is_nullable": "YES", "default": None})


def test_sqlite_connect_enables_foreign_keys(sqlite, tmp_path):
    connection = sqlite.connect(DatabaseConfig(type="sqlite", database=str(tmp_path / "test.db")))
    try:
        assert connection.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    finally:
        connection.close()
