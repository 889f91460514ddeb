"""Making ad-hoc query results safely editable."""

from row_editing.defaults import build_default_row
from row_editing.editability import check_editable, is_editable, target_table
from row_editing.mutation import MutationAction, MutationIntent, synthesize
from row_editing.reconcile import MissingPrimaryKeyError, RowNotFoundError, complete_row
from row_editing.sql_ast import QueryShape, analyze_query, parse_sql

__all__ = [
    "MissingPrimaryKeyError",
    "MutationAction",
    "MutationIntent",
    "QueryShape",
    "RowNotFoundError",
    "analyze_query",
    "build_default_row",
    "check_editable",
    "complete_row",
    "is_editable",
    "parse_sql",
    "synthesize",
    "target_table",
]
