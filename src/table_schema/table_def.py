from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .column_def import ColumnDef


class ColumnNotFoundError(KeyError):
    """Raised when a column name is not part of a table schema."""

    def __init__(self, column_name: str, table_name: Optional[str] = None) -> None:
        self.column_name = column_name
        self.table_name = table_name
        where = f" in table '{table_name}'" if table_name else ""
        super().__init__(f"Column '{column_name}' not found{where}")

    def __str__(self) -> str:
        return str(self.args[0])


def _ordinal_sort_key(indexed: tuple) -> tuple:
    index, column = indexed
    if column.ordinal_position is None:
        return (1, 0, index)
    return (0, column.ordinal_position, index)


class TableDef(BaseModel):
    """Ordered column schema for a single table.

    Columns are kept in ordinal-position order; primary-key order follows it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    database: Optional[str] = None
    columns: List[ColumnDef] = Field(default_factory=list)

    @field_validator("columns")
    @classmethod
    def _order_and_check_columns(cls, columns: List[ColumnDef]) -> List[ColumnDef]:
        seen = set()
        for column in columns:
            if column.name in seen:
                raise ValueError(f"Duplicate column name '{column.name}'")
            seen.add(column.name)
        return [column for _, column in sorted(enumerate(columns), key=_ordinal_sort_key)]

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def primary_keys(self) -> List[str]:
        """Names of the primary-key columns in ordinal order."""
        return [column.name for column in self.columns if column.is_primary_key]

    @property
    def has_primary_key(self) -> bool:
        return any(column.is_primary_key for column in self.columns)

    def get_column(self, name: str) -> ColumnDef:
        """Return the column called ``name`` or raise ColumnNotFoundError."""
        for column in self.columns:
            if column.name == name:
                return column
        raise ColumnNotFoundError(name, self.name)

    def has_column(self, name: str) -> bool:
        return any(column.name == name for column in self.columns)
