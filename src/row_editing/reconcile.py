"""Completing partial result rows before they are edited.

A query may project only some columns of a table. Before such a row can seed an
edit form, the full row is fetched back by its primary key.
"""

import logging
from typing import Awaitable, Callable, Dict, Optional

from dal.mysql.quoting import quote_identifier, quote_table_name, sql_literal
from table_schema import Row, RowValue, TableDef

logger = logging.getLogger(__name__)

FetchByKeys = Callable[[Dict[str, RowValue]], Awaitable[Optional[Row]]]


class RowNotFoundError(LookupError):
    """Raised when the row to complete no longer exists."""

    def __init__(self, table_name: str, keys: Dict[str, RowValue]) -> None:
        self.table_name = table_name
        self.keys = dict(keys)
        super().__init__(f"Row not found in table '{table_name}'")


class MissingPrimaryKeyError(ValueError):
    """Raised when a row must be addressed by key but its table has no primary key."""

    def __init__(self, table_name: str) -> None:
        self.table_name = table_name
        super().__init__(f"Table '{table_name}' has no primary key; rows cannot be addressed")


def needs_fetch(display_row: Row, table_def: TableDef) -> bool:
    """Return True when ``display_row`` lacks any column of the schema."""
    return any(name not in display_row for name in table_def.column_names)


def primary_key_values(row: Row, table_def: TableDef) -> Dict[str, RowValue]:
    """Return the primary-key column values of ``row`` in key order."""
    missing = [name for name in table_def.primary_keys if name not in row]
    if missing:
        raise ValueError(
            f"Row is missing primary-key column(s) {', '.join(missing)} "
            f"of table '{table_def.name}'"
        )
    return {name: row[name] for name in table_def.primary_keys}


def build_primary_key_predicate(keys: Dict[str, RowValue]) -> str:
    """Build ``a = 1 AND b = 'x'`` from a key/value mapping."""
    terms = []
    for name, value in keys.items():
        column = quote_identifier(name)
        if value is None:
            terms.append(f"{column} IS NULL")
        else:
            terms.append(f"{column} = {sql_literal(value)}")
    return " AND ".join(terms)


async def fetch_row_by_primary_key(
    conn, table_name: str, keys: Dict[str, RowValue], database: Optional[str] = None
) -> Optional[Row]:
    """Fetch the single row of ``table_name`` identified by ``keys``."""
    if not keys:
        raise ValueError("Cannot fetch a row without primary-key values")
    sql = (
        f"SELECT * FROM {quote_table_name(table_name, database)} "
        f"WHERE {build_primary_key_predicate(keys)}"
    )
    return await conn.fetchrow(sql)


async def complete_row(display_row: Row, table_def: TableDef, fetch_by_keys: FetchByKeys) -> Row:
    """Return a row holding every schema column, fetching it when needed.

    Raises RowNotFoundError when the row was deleted in the meantime.
    """
    if not needs_fetch(display_row, table_def):
        return dict(display_row)

    if not table_def.has_primary_key:
        raise MissingPrimaryKeyError(table_def.name)
    keys = primary_key_values(display_row, table_def)
    fetched = await fetch_by_keys(keys)
    if fetched is None:
        logger.warning("Row to edit no longer exists in table %s", table_def.name)
        raise RowNotFoundError(table_def.name, keys)
    return {**display_row, **fetched}
