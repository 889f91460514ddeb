"""Coercion between form input and the row value domain.

Integer columns take whole numbers, decimal columns take fractional numbers,
boolean columns take 1/0. Text that does not parse is left untouched so the
server reports the problem verbatim.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from dal.util.logical_types import DataTypeCategory, classify_data_type
from table_schema import ColumnDef, Row, RowValue, TableDef

INPUT_MODE_NUMERIC = "numeric"
INPUT_MODE_DECIMAL = "decimal"
INPUT_MODE_TEXT = "text"

# BIGINT UNSIGNED has 20 digits; longer input is left for the server to reject.
_MAX_INTEGER_DIGITS = 20
_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def input_mode(data_type: str) -> str:
    """Return the keyboard/input mode for a column's DATA_TYPE."""
    category = classify_data_type(data_type)
    if category is DataTypeCategory.INTEGER:
        return INPUT_MODE_NUMERIC
    if category is DataTypeCategory.DECIMAL:
        return INPUT_MODE_DECIMAL
    return INPUT_MODE_TEXT


def _coerce_integer(text: str) -> RowValue:
    try:
        number = Decimal(text)
    except InvalidOperation:
        return text
    if not number.is_finite() or number.adjusted() >= _MAX_INTEGER_DIGITS:
        return text
    if number != number.to_integral_value():
        return text
    return int(number)


def _coerce_decimal(text: str) -> RowValue:
    try:
        number = Decimal(text)
    except InvalidOperation:
        return text
    return number if number.is_finite() else text


def _coerce_boolean(text: str) -> RowValue:
    lowered = text.lower()
    if lowered in _TRUE_WORDS:
        return 1
    if lowered in _FALSE_WORDS:
        return 0
    return text


def coerce_value(column: ColumnDef, value: Any) -> RowValue:
    """Convert a form value into the value domain of ``column``."""
    if value is None:
        return None
    category = classify_data_type(column.data_type)
    if isinstance(value, bool):
        return int(value) if category is not DataTypeCategory.STRING else str(value).lower()
    if category is DataTypeCategory.STRING:
        return value if isinstance(value, (str, bytes)) else str(value)
    if isinstance(value, float) and category is DataTypeCategory.DECIMAL:
        return Decimal(repr(value))
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not text:
        return None if column.is_nullable else ""
    if category is DataTypeCategory.INTEGER:
        return _coerce_integer(text)
    if category is DataTypeCategory.DECIMAL:
        return _coerce_decimal(text)
    return _coerce_boolean(text)


def coerce_row(table_def: TableDef, row: Row) -> Row:
    """Coerce every schema column of ``row``; other keys are copied as-is."""
    coerced: Row = {}
    for name, value in row.items():
        if table_def.has_column(name):
            coerced[name] = coerce_value(table_def.get_column(name), value)
        else:
            coerced[name] = value
    return coerced
