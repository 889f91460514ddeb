"""Decide whether rows of a query result can be edited or deleted one by one.

A row is editable only when its identity can be rebuilt from the result: the
query must read a single table and project every primary-key column (or all
columns) under its own name, with no alias reusing a key column name.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from row_editing.sql_ast import STATEMENT_SELECT, QueryShape
from table_schema import TableDef


class NotEditableReason(str, Enum):
    """Why a query result is read-only."""

    UNPARSED = "unparsed"
    NOT_SELECT = "not_select"
    NO_SINGLE_TABLE = "no_single_table"
    PRIMARY_KEY_NOT_SELECTED = "primary_key_not_selected"


REASON_MESSAGES = {
    NotEditableReason.UNPARSED: "The query could not be analyzed",
    NotEditableReason.NOT_SELECT: "Only SELECT results can be edited",
    NotEditableReason.NO_SINGLE_TABLE: "Edit of query from multiple tables is not supported",
    NotEditableReason.PRIMARY_KEY_NOT_SELECTED: "Select at least all primary columns",
}


@dataclass(frozen=True)
class EditabilityDecision:
    editable: bool
    reason: Optional[NotEditableReason] = None
    missing_primary_keys: tuple = ()

    @property
    def message(self) -> Optional[str]:
        """User-facing explanation when the result is not editable."""
        if self.reason is None:
            return None
        return REASON_MESSAGES[self.reason]


def target_table(shape: QueryShape) -> Optional[str]:
    """Return the single table a query reads from, or None."""
    if shape.statement_kind != STATEMENT_SELECT:
        return None
    return shape.target_table


def check_editable(shape: QueryShape, table_def: Optional[TableDef]) -> EditabilityDecision:
    if not shape.parsed:
        return EditabilityDecision(False, NotEditableReason.UNPARSED)
    if shape.statement_kind != STATEMENT_SELECT:
        return EditabilityDecision(False, NotEditableReason.NOT_SELECT)
    if target_table(shape) is None or table_def is None:
        return EditabilityDecision(False, NotEditableReason.NO_SINGLE_TABLE)
    # A key name taken by an alias would hand back another value as the key.
    shadowed = set(shape.shadowed_columns)
    selected = set(shape.projected_columns)
    missing = tuple(
        name
        for name in table_def.primary_keys
        if name in shadowed or not (shape.is_wildcard or name in selected)
    )
    if missing:
        return EditabilityDecision(
            False, NotEditableReason.PRIMARY_KEY_NOT_SELECTED, missing_primary_keys=missing
        )
    return EditabilityDecision(True)


def is_editable(shape: QueryShape, table_def: Optional[TableDef]) -> bool:
    """Return True when each result row can be targeted by UPDATE/DELETE."""
    return check_editable(shape, table_def).editable
