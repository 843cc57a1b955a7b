"""Tests for wasp.transaction: commits, rollbacks, savepoints and level checks."""

import pytest

from wasp.errors import TransactionError
from wasp.query import Q


@pytest.fixture
def users(db, users_table):
    db.create_table(users_table())
    return db


def names(db):
    return [row["name"] for row in db.fetch_all(Q.select("name", Q.from_("users"), Q.order("name")))]


def test_transaction_commits(users):
    with users.transaction() as t:
        assert users.in_transaction
        t.execute(Q.insert("users", {"name": "Alice"})).close()
    assert not users.in_transaction
    assert names(users) == ["Alice"]


def test_transaction_rolls_back_on_error(users):
    with pytest.raises(ValueError, match="boom"):
        with users.transaction() as t:
            t.execute(Q.insert("users", {"name": "Alice"})).close()
            raise ValueError("boom")
    assert names(users) == []
    assert not users.in_transaction


def test_nested_transaction_uses_savepoint(users):
    with users.transaction() as outer:
        outer.execute(Q.insert("users", {"name": "Alice"})).close()
        with pytest.raises(ValueError):
            with users.transaction() as inner:
                assert inner.level == 2
                inner.execute(Q.insert("users", {"name": "Bob"})).close()
                raise ValueError("inner failure")
        with users.transaction() as inner:
            inner.execute(Q.insert("users", {"name": "Carol"})).close()
    assert names(users) == ["Alice", "Carol"]


def test_outer_transaction_cannot_be_used_from_nested_level(users):
    with users.transaction() as outer:
        with users.transaction():
            with pytest.raises(TransactionError, match="Cannot use transaction level 1 from level 2"):
                outer.execute(Q.insert("users", {"name": "Alice"}))


def test_finished_transaction_is_inactive(users):
    with users.transaction() as t:
        pass
    assert not t.active
    with pytest.raises(TransactionError, match="no longer active"):
        t.fetch_all(Q.select(Q.from_("users")))


def test_cannot_close_inside_transaction(users):
    with users.transaction():
        with pytest.raises(TransactionError, match="inside a transaction"):
            users.close()
