from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

ColumnDefault = Union[str, int, float, Decimal, None]

PRIMARY_KEY_MARKER = "PRI"


class ColumnDef(BaseModel):
    """Canonical representation of a table column as read from the catalog."""

    model_config = ConfigDict(frozen=True)

    name: str
    data_type: str
    column_type: Optional[str] = None
    column_key: str = ""
    is_primary_key: bool = False
    is_nullable: bool = True
    default: ColumnDefault = None
    ordinal_position: Optional[int] = None
    comment: Optional[str] = None
    character_maximum_length: Optional[int] = None
    character_octet_length: Optional[int] = None

    @property
    def label(self) -> str:
        """Return the form label, marking primary-key columns with an asterisk."""
        label = f"{self.name} | {self.column_type or self.data_type}"
        if self.is_primary_key:
            label += " *"
        return label
