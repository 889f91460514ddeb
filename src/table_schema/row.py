"""Row value domain shared by the DAL and the editing layer."""

from decimal import Decimal
from typing import Dict, Union

# A form or result value: text, a number, binary data or SQL NULL. Booleans
# from the form are accepted and rendered as TRUE/FALSE.
RowValue = Union[None, str, int, float, Decimal, bytes]
Row = Dict[str, RowValue]
