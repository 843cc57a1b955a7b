import pytest

from wasp.database import Database
from wasp.dialects import MysqlDialect, PostgresDialect, SqliteDialect
from wasp.schema import Column, ColumnType, Index, IndexType, Table


@pytest.fixture
def sqlite():
    return SqliteDialect()


@pytest.fixture
def mysql():
    return MysqlDialect()


@pytest.fixture
def postgres():
    return PostgresDialect()


@pytest.fixture(scope="function")
def db(tmp_path):
    """File-backed SQLite database, fresh for each test."""
    database = Database(f"sqlite:///{tmp_path / 'test.sqlite3'}")
    yield database
    database.close()


@pytest.fixture
def users_table():
    """Factory for a ``users`` table definition (a new Table each call)."""
    def build():
        return (
            Table(name="users")
            .add_column(Column(name="id", type=ColumnType.INT, nullable=False, serial=True))
            .add_column(Column(name="name", type=ColumnType.VARCHAR, max_length=64, nullable=False))
            .add_column(Column(name="age", type=ColumnType.INT))
            .add_index(Index(type=IndexType.PRIMARY, columns=["id"]))
        )
    return build
