"""Tests for deciding whether query results are editable."""

import pytest

from row_editing.editability import (
    NotEditableReason,
    check_editable,
    is_editable,
    target_table,
)
from row_editing.sql_ast import analyze_query
from table_schema import ColumnDef, TableDef


@pytest.fixture
def tenant_users_table() -> TableDef:
    return TableDef(
        name="users",
        columns=[
            ColumnDef(name="id", data_type="int", is_primary_key=True, ordinal_position=1),
            ColumnDef(name="tenant_id", data_type="int", is_primary_key=True, ordinal_position=2),
            ColumnDef(name="name", data_type="varchar", ordinal_position=3),
        ],
    )


def test_projection_missing_a_primary_key_is_not_editable(tenant_users_table):
    decision = check_editable(analyze_query("SELECT id FROM users"), tenant_users_table)

    assert decision.editable is False
    assert decision.reason is NotEditableReason.PRIMARY_KEY_NOT_SELECTED
    assert decision.missing_primary_keys == ("tenant_id",)
    assert decision.message == "Select at least all primary columns"


def test_join_is_never_editable(users_table):
    shape = analyze_query("SELECT * FROM users JOIN orders ON orders.user_id = users.id")

    decision = check_editable(shape, users_table)

    assert decision.editable is False
    assert decision.reason is NotEditableReason.NO_SINGLE_TABLE
    assert decision.message == "Edit of query from multiple tables is not supported"
    assert target_table(shape) is None


def test_wildcard_is_editable(users_table):
    assert is_editable(analyze_query("SELECT * FROM users WHERE id > 10"), users_table)


def test_all_primary_keys_selected(memberships_table, tenant_users_table):
    shape = analyze_query("SELECT role, id, tenant_id FROM memberships")
    assert is_editable(shape, memberships_table)
    assert is_editable(analyze_query("SELECT tenant_id, id FROM users"), tenant_users_table)


def test_key_under_alias_does_not_count(users_table):
    decision = check_editable(analyze_query("SELECT id AS ident, label FROM users"), users_table)

    assert decision.editable is False
    assert decision.missing_primary_keys == ("id",)


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT parent_id AS id, parent_id FROM users",
        "SELECT label AS id FROM users",
        "SELECT id, label AS id FROM users",
        "SELECT parent_id AS id, * FROM users",
        "SELECT 7 AS id, label FROM users",
    ],
)
def test_other_value_under_key_name_is_not_editable(users_table, sql):
    decision = check_editable(analyze_query(sql), users_table)

    assert decision.editable is False
    assert decision.reason is NotEditableReason.PRIMARY_KEY_NOT_SELECTED
    assert decision.missing_primary_keys == ("id",)


def test_alias_naming_the_key_after_itself_is_editable(users_table):
    assert is_editable(analyze_query("SELECT u.id AS id, label FROM users u"), users_table)


def test_key_matching_is_exact(users_table):
    assert not is_editable(analyze_query("SELECT ID FROM users"), users_table)


def test_unparsed_query(users_table):
    decision = check_editable(analyze_query("SELECT * FROM users WHERE (id = 1"), users_table)

    assert decision.editable is False
    assert decision.reason is NotEditableReason.UNPARSED


def test_non_select_statement(users_table):
    decision = check_editable(analyze_query("DELETE FROM users WHERE id = 1"), users_table)

    assert decision.reason is NotEditableReason.NOT_SELECT
    assert target_table(analyze_query("UPDATE users SET label = 'x'")) is None


def test_missing_schema_means_no_single_table():
    decision = check_editable(analyze_query("SELECT * FROM users"), None)
    assert decision.reason is NotEditableReason.NO_SINGLE_TABLE


def test_table_without_primary_key_is_vacuously_editable():
    table = TableDef(name="log", columns=[ColumnDef(name="line", data_type="text")])
    assert is_editable(analyze_query("SELECT line FROM log"), table)


def test_editable_decision_has_no_message(users_table):
    decision = check_editable(analyze_query("SELECT id FROM users"), users_table)

    assert decision.editable is True
    assert decision.reason is None
    assert decision.message is None
