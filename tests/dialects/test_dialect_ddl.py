"""Tests for the DDL generated by each dialect from the schema model."""

import datetime
import decimal

import pytest

from wasp.errors import DBError
from wasp.schema import Column, ColumnType, ForeignKey, ForeignKeyAction, Index, IndexType, Table


def orders_for(users):
    orders = (
        Table(name="orders")
        .add_column(Column(name="id", type=ColumnType.INT, nullable=False))
        .add_column(Column(name="user_id", type=ColumnType.INT, nullable=False))
        .add_index(Index(type=IndexType.PRIMARY, columns=["id"]))
        .add_index(Index(type=IndexType.INDEX, columns=["user_id"]))
    )
    foreign_key = ForeignKey(
        columns=[orders.get_column("user_id")],
        referred_columns=[users.get_column("id")],
        on_delete=ForeignKeyAction.CASCADE,
    )
    return orders.add_foreign_key(foreign_key)


def test_sqlite_create_table_inlines_constraints(sqlite, users_table):
    users = users_table()
    assert sqlite.create_table(users) == [
        'CREATE TABLE "users" (\n'
        '    "id" INTEGER PRIMARY KEY AUTOINCREMENT,\n'
        '    "name" VARCHAR(64) NOT NULL,\n'
        '    "age" INTEGER NULL\n'
        ')'
    ]
    assert sqlite.create_table(orders_for(users)) == [
        'CREATE TABLE "orders" (\n'
        '    "id" INTEGER NOT NULL,\n'
        '    "user_id" INTEGER NOT NULL,\n'
        '    PRIMARY KEY ("id"),\n'
        '    CONSTRAINT "orders_user_id_fkey" FOREIGN KEY ("user_id") REFERENCES "users" ("id") ON DELETE CASCADE\n'
        ')',
        'CREATE INDEX "orders_user_id_idx" ON "orders" ("user_id")',
    ]


def test_sqlite_serial_must_be_the_primary_key(sqlite):
    table = (
        Table(name="t")
        .add_column(Column(name="id", type=ColumnType.INT, serial=True))
        .add_column(Column(name="code", type=ColumnType.INT))
        .add_index(Index(type=IndexType.PRIMARY, columns=["code"]))
    )
    with pytest.raises(DBError, match="must be the primary key"):
        sqlite.create_table(table)


def test_sqlite_cannot_alter_constraints(sqlite, users_table):
    users = users_table()
    with pytest.raises(DBError, match="cannot add a foreign key"):
        sqlite.create_foreign_key(users, ForeignKey())
    with pytest.raises(DBError, match="cannot make an existing column auto-increment"):
        sqlite.create_serial(users, users.get_column("id"))
    with pytest.raises(DBError, match="primary key"):
        sqlite.drop_index(users, users.primary_key)


def test_mysql_create_table(mysql, users_table):
    users = users_table()
    assert mysql.create_table(users) == [
        "CREATE TABLE `users` (\n"
        "    `id` INT NOT NULL,\n"
        "    `name` VARCHAR(64) NOT NULL,\n"
        "    `age` INT NULL\n"
        ") ENGINE=InnoDB",
        "ALTER TABLE `users` ADD PRIMARY KEY (`id`)",
        "ALTER TABLE `users` MODIFY `id` INT NOT NULL AUTO_INCREMENT",
    ]
    assert mysql.create_table(orders_for(users))[1:] == [
        "ALTER TABLE `orders` ADD PRIMARY KEY (`id`)",
        "CREATE INDEX `orders_user_id_idx` ON `orders` (`user_id`)",
        "ALTER TABLE `orders` ADD CONSTRAINT `orders_user_id_fkey` FOREIGN KEY (`user_id`)"
        " REFERENCES `users` (`id`) ON DELETE CASCADE",
    ]


def test_mysql_drops(mysql, users_table):
    users = users_table()
    orders = orders_for(users)
    assert mysql.drop_table("users") == ["DROP TABLE `users`"]
    assert mysql.drop_table("users", safe=True) == ["DROP TABLE IF EXISTS `users`"]
    assert mysql.drop_index(users, users.primary_key) == ["ALTER TABLE `users` DROP PRIMARY KEY"]
    assert mysql.drop_index(orders, orders.indexes[1]) == ["DROP INDEX `orders_user_id_idx` ON `orders`"]
    assert mysql.drop_foreign_key(orders, orders.foreign_keys[0]) == [
        "ALTER TABLE `orders` DROP FOREIGN KEY `orders_user_id_fkey`"
    ]
    assert mysql.drop_serial(users, users.get_column("id")) == ["ALTER TABLE `users` MODIFY `id` INT NOT NULL"]


def test_postgres_create_table_uses_a_sequence(postgres, users_table):
    assert postgres.create_table(users_table()) == [
        'CREATE TABLE "users" (\n'
        '    "id" INTEGER NOT NULL,\n'
        '    "name" CHARACTER VARYING(64) NOT NULL,\n'
        '    "age" INTEGER NULL\n'
        ')',
        'ALTER TABLE "users" ADD PRIMARY KEY ("id")',
        'CREATE SEQUENCE "users_id_seq"',
        'ALTER TABLE "users" ALTER COLUMN "id" SET DEFAULT nextval(\'users_id_seq\')',
        'ALTER SEQUENCE "users_id_seq" OWNED BY "users"."id"',
    ]


def test_postgres_drops(postgres, users_table):
    users = users_table()
    assert postgres.drop_index(users, users.primary_key) == ['ALTER TABLE "users" DROP CONSTRAINT "users_pkey"']
    assert postgres.drop_serial(users, users.get_column("id")) == [
        'ALTER TABLE "users" ALTER COLUMN "id" DROP DEFAULT',
        'DROP SEQUENCE IF EXISTS "users_id_seq"',
    ]


def test_add_and_remove_column(postgres, users_table):
    users = users_table()
    column = Column(name="email", type=ColumnType.TEXT)
    assert postgres.add_column(users, column) == ['ALTER TABLE "users" ADD COLUMN "email" TEXT NULL']
    assert postgres.remove_column(users, column) == ['ALTER TABLE "users" DROP COLUMN "email"']


def test_unique_index(sqlite, users_table):
    users = users_table()
    index = Index(type=IndexType.UNIQUE, columns=["name", "age"])
    users.add_index(index)
    assert sqlite.create_index(users, index) == ['CREATE UNIQUE INDEX "users_name_age_uidx" ON "users" ("name", "age")']
    assert sqlite.drop_index(users, index) == ['DROP INDEX "users_name_age_uidx"']


@pytest.mark.parametrize("column, expected", [
    (Column(name="status", type=ColumnType.VARCHAR, max_length=16, nullable=False, default="it's"),
     "\"status\" VARCHAR(16) NOT NULL DEFAULT 'it''s'"),
    (Column(name="price", type=ColumnType.DECIMAL, numeric_precision=10, numeric_scale=2, default=decimal.Decimal("9.90")),
     '"price" NUMERIC(10,2) NULL DEFAULT 9.90'),
    (Column(name="active", type=ColumnType.BOOLEAN, default=True), '"active" BOOLEAN NULL DEFAULT 1'),
    (Column(name="since", type=ColumnType.DATE, default=datetime.date(2020, 1, 2)), "\"since\" DATE NULL DEFAULT '2020-01-02'"),
    (Column(name="payload", type=ColumnType.JSON), '"payload" TEXT NULL'),
])
def test_column_definition(sqlite, column, expected):
    assert sqlite.column_definition(column) == expected


def test_boolean_defaults_per_dialect(mysql, postgres):
    column = Column(name="active", type=ColumnType.BOOLEAN, nullable=False, default=False)
    assert mysql.column_definition(column) == "`active` TINYINT(1) NOT NULL DEFAULT 0"
    assert postgres.column_definition(column) == '"active" BOOLEAN NOT NULL DEFAULT FALSE'


def test_column_definition_errors(sqlite):
    with pytest.raises(DBError, match="needs a maximum length"):
        sqlite.column_definition(Column(name="code", type=ColumnType.VARCHAR))
    with pytest.raises(DBError, match="default value"):
        sqlite.column_definition(Column(name="tags", type=ColumnType.TEXT, default=["a"]))


def test_table_without_columns(sqlite, mysql):
    for dialect in (sqlite, mysql):
        with pytest.raises(DBError, match="has no columns"):
            dialect.create_table(Table(name="empty"))
