"""Synthesis of INSERT/UPDATE/DELETE statements for a single table row.

Statements are plain SQL text with every value rendered as an escaped literal.
UPDATE and DELETE are always constrained by the row's original primary-key
values, so an edit that changes a key still targets the row it was opened on.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from dal.mysql.quoting import quote_identifier, quote_table_name, sql_literal
from row_editing.reconcile import (
    MissingPrimaryKeyError,
    build_primary_key_predicate,
    primary_key_values,
)
from table_schema import ColumnNotFoundError, Row, TableDef

logger = logging.getLogger(__name__)


class MutationAction(str, Enum):
    NEW = "new"
    EDIT = "edit"
    CLONE = "clone"
    DELETE = "delete"


INSERT_ACTIONS = frozenset({MutationAction.NEW, MutationAction.CLONE})


def diff_values(initial_values: Row, edited_values: Row) -> Row:
    """Return the edited entries whose value differs from the initial row."""
    return {
        name: value
        for name, value in edited_values.items()
        if name not in initial_values or initial_values[name] != value
    }


def has_changes(initial_values: Row, edited_values: Row) -> bool:
    return bool(diff_values(initial_values, edited_values))


def scrub_primary_keys(values: Row, table_def: TableDef) -> Row:
    """Drop primary-key columns left empty so the server generates them."""
    keys = set(table_def.primary_keys)
    return {name: value for name, value in values.items() if not (name in keys and not value)}


def _check_columns(values: Row, table_def: TableDef) -> None:
    for name in values:
        if not table_def.has_column(name):
            raise ColumnNotFoundError(name, table_def.name)


def _schema_ordered(values: Row, table_def: TableDef) -> List[str]:
    return [name for name in table_def.column_names if name in values]


def _key_predicate(initial_values: Row, table_def: TableDef) -> str:
    if not table_def.has_primary_key:
        raise MissingPrimaryKeyError(table_def.name)
    return build_primary_key_predicate(primary_key_values(initial_values, table_def))


def build_insert(table: str, values: Row, table_def: TableDef) -> str:
    names = _schema_ordered(values, table_def)
    columns = ", ".join(quote_identifier(name) for name in names)
    literals = ", ".join(sql_literal(values[name]) for name in names)
    return f"INSERT INTO {table} ({columns}) VALUES ({literals})"


def build_update(table: str, changes: Row, initial_values: Row, table_def: TableDef) -> str:
    where = _key_predicate(initial_values, table_def)
    assignments = ", ".join(
        f"{quote_identifier(name)} = {sql_literal(changes[name])}"
        for name in _schema_ordered(changes, table_def)
    )
    if not assignments:
        logger.warning("Building UPDATE for table %s with no changed columns", table_def.name)
        return f"UPDATE {table} SET WHERE {where}"
    return f"UPDATE {table} SET {assignments} WHERE {where}"


def build_delete(table: str, initial_values: Row, table_def: TableDef) -> str:
    return f"DELETE FROM {table} WHERE {_key_predicate(initial_values, table_def)}"


def synthesize(
    action: Union[MutationAction, str],
    table_name: str,
    table_def: TableDef,
    initial_values: Row,
    edited_values: Row,
    database: Optional[str] = None,
) -> str:
    """Return the SQL statement that applies ``action`` to one row.

    Args:
        action: new, clone, edit or delete.
        table_name: Table the statement targets.
        table_def: Column schema of that table.
        initial_values: Row as it was when the edit session opened.
        edited_values: Row as submitted by the user.
        database: Optional database qualifier for the table name.

    Raises:
        ColumnNotFoundError: An edited column is not part of the schema.
        MissingPrimaryKeyError: UPDATE/DELETE requested on a table without a key.
    """
    action = MutationAction(action)
    _check_columns(edited_values, table_def)
    table = quote_table_name(table_name, database)

    if action in INSERT_ACTIONS:
        return build_insert(table, scrub_primary_keys(edited_values, table_def), table_def)
    if action is MutationAction.EDIT:
        changes = diff_values(initial_values, edited_values)
        return build_update(table, changes, initial_values, table_def)
    return build_delete(table, initial_values, table_def)


@dataclass(frozen=True)
class MutationIntent:
    """A pending row change, from opening the editor until it is submitted."""

    action: MutationAction
    table_name: str
    initial_values: Row = field(default_factory=dict)
    edited_values: Row = field(default_factory=dict)
    database: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "action", MutationAction(self.action))
        object.__setattr__(self, "initial_values", dict(self.initial_values))
        object.__setattr__(self, "edited_values", dict(self.edited_values))

    @property
    def changes(self) -> Row:
        return diff_values(self.initial_values, self.edited_values)

    def to_sql(self, table_def: TableDef) -> str:
        return synthesize(
            self.action,
            self.table_name,
            table_def,
            self.initial_values,
            self.edited_values,
            database=self.database,
        )
