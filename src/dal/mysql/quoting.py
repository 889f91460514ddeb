"""Identifier quoting and literal rendering for MySQL statements.

The executor has no parameter binding, so every value reaches the server as an
escaped literal produced here.
"""

import math
from decimal import Decimal
from typing import Optional

from table_schema.row import RowValue


def quote_identifier(name: str) -> str:
    """Wrap an identifier in backticks, doubling embedded backticks."""
    return "`" + name.replace("`", "``") + "`"


def quote_table_name(table_name: str, database: Optional[str] = None) -> str:
    """Quote a table name, qualified by its database when one is given."""
    if database:
        return f"{quote_identifier(database)}.{quote_identifier(table_name)}"
    return quote_identifier(table_name)


def escape_string(value: str) -> str:
    """Prefix backslashes and single quotes with a backslash."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def sql_literal(value: RowValue) -> str:
    """Render a row value as a MySQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Cannot render non-finite decimal {value!r} as SQL")
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"Cannot render non-finite float {value!r} as SQL")
        return repr(value)
    if isinstance(value, str):
        return f"'{escape_string(value)}'"
    if isinstance(value, (bytes, bytearray)):
        return f"X'{bytes(value).hex().upper()}'"
    raise TypeError(f"Unsupported row value type: {type(value).__name__}")
