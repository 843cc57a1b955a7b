"""Tests for wasp.query.field and wasp.query.parameters: qualification, quoting, default table."""

import pytest

from wasp.errors import DBError
from wasp.query import FieldAlias, FieldExpression, Parameters, TableClause, Wildcard


def test_field_uses_default_table(sqlite):
    parameters = Parameters(sqlite)
    parameters.default_table = TableClause(name="t1")
    assert FieldExpression(field="field").to_sql(parameters) == '"t1"."field"'


def test_field_uses_default_table_with_dialect_quoting(mysql):
    parameters = Parameters(mysql)
    parameters.default_table = TableClause(name="t1")
    assert FieldExpression(field="field").to_sql(parameters) == "`t1`.`field`"


def test_field_prefers_alias_of_default_table(sqlite):
    parameters = Parameters(sqlite)
    parameters.default_table = TableClause(name="users", alias="u")
    assert FieldExpression(field="id").to_sql(parameters) == '"u"."id"'


def test_explicit_table_wins_over_default(sqlite):
    parameters = Parameters(sqlite)
    parameters.default_table = TableClause(name="t1")
    assert FieldExpression(field="id", table="t2").to_sql(parameters) == '"t2"."id"'


def test_field_without_any_table_renders_bare(sqlite):
    assert FieldExpression(field="id").to_sql(Parameters(sqlite)) == '"id"'


def test_ambiguous_unqualified_field_fails(sqlite):
    parameters = Parameters(sqlite)
    parameters.register_table(TableClause(name="a"))
    parameters.register_table(TableClause(name="b"))
    with pytest.raises(DBError, match="no default table"):
        FieldExpression(field="id").to_sql(parameters)


def test_embedded_quotes_are_escaped(sqlite, mysql):
    assert FieldExpression(field='we"ird').to_sql(Parameters(sqlite)) == '"we""ird"'
    assert FieldExpression(field="we`ird").to_sql(Parameters(mysql)) == "`we``ird`"


def test_invalid_field_table_is_rejected():
    with pytest.raises(ValueError, match="Invalid table"):
        FieldExpression(field="id", table=42)


def test_empty_field_name_is_rejected():
    with pytest.raises(ValueError, match="Invalid field"):
        FieldExpression(field="")


def test_wildcard(sqlite):
    assert Wildcard().to_sql(Parameters(sqlite)) == "*"
    assert Wildcard(table="t").to_sql(Parameters(sqlite)) == '"t".*'


def test_field_alias(sqlite):
    assert FieldAlias(expression="name", alias="n").to_sql(Parameters(sqlite)) == '"name" AS "n"'
    assert FieldAlias(expression="name").to_sql(Parameters(sqlite)) == '"name"'


def test_scope_restores_tables_and_shares_values(sqlite):
    parameters = Parameters(sqlite)
    outer = TableClause(name="outer")
    parameters.default_table = outer
    parameters.register_table(outer)
    with parameters.scope(TableClause(name="inner")) as scoped:
        assert scoped.tables == {}
        scoped.assign(1)
    assert parameters.default_table is outer
    assert list(parameters.tables) == ["outer"]
    assert parameters.values == {"p1": 1}
