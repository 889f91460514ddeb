"""Classification of MySQL column types into the form value categories."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from table_schema import TableDef


class DataTypeCategory(str, Enum):
    """Value category a column's DATA_TYPE maps to."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"


# Checked in order; the first set containing the type name wins.
_CATEGORY_TABLE = (
    (DataTypeCategory.BOOLEAN, frozenset({"bool", "boolean"})),
    (
        DataTypeCategory.INTEGER,
        frozenset({"bit", "tinyint", "smallint", "mediumint", "int", "integer", "bigint"}),
    ),
    (DataTypeCategory.DECIMAL, frozenset({"float", "double", "dec", "decimal"})),
)

_STRING_TYPES = frozenset({"char", "varchar", "tinytext", "text", "mediumtext", "longtext"})


def classify_data_type(type_name: Optional[str]) -> DataTypeCategory:
    """Map a DATA_TYPE name to its category; unknown names are strings."""
    normalized = (type_name or "").strip().lower()
    for category, names in _CATEGORY_TABLE:
        if normalized in names:
            return category
    return DataTypeCategory.STRING


def is_boolean(type_name: Optional[str]) -> bool:
    return classify_data_type(type_name) is DataTypeCategory.BOOLEAN


def is_number(type_name: Optional[str]) -> bool:
    return classify_data_type(type_name) in (DataTypeCategory.INTEGER, DataTypeCategory.DECIMAL)


def is_decimal(type_name: Optional[str]) -> bool:
    """Return True for fractional types (selects decimal input coercion)."""
    return classify_data_type(type_name) is DataTypeCategory.DECIMAL


def is_string(type_name: Optional[str]) -> bool:
    """Return True only for the textual types (char/varchar/*text)."""
    return (type_name or "").strip().lower() in _STRING_TYPES


def value_kind(table_def: TableDef, column_name: str) -> str:
    """Return 'boolean', 'number' or 'string' for a column of ``table_def``.

    Raises ColumnNotFoundError when the column is not in the schema.
    """
    column = table_def.get_column(column_name)
    if is_boolean(column.data_type):
        return "boolean"
    if is_number(column.data_type):
        return "number"
    return "string"
