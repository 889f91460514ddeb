"""Canonical table schema models."""

from .column_def import ColumnDef
from .row import Row, RowValue
from .table_def import ColumnNotFoundError, TableDef

__all__ = ["ColumnDef", "ColumnNotFoundError", "Row", "RowValue", "TableDef"]
