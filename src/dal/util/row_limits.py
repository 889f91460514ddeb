"""Result-set size cap for queries typed by the user."""

from typing import List, Optional, Tuple

from common.config.env import get_env_int

MAX_ROWS_ENV = "DAL_SYNC_MAX_ROWS"


def resolve_max_rows(explicit: Optional[int] = None) -> int:
    """Pick the row cap: an explicit value wins over DAL_SYNC_MAX_ROWS.

    Zero or a negative number means no cap.
    """
    value = explicit if explicit is not None else get_env_int(MAX_ROWS_ENV, default=0)
    return max(value or 0, 0)


def truncate_rows(rows: List[dict], max_rows: int) -> Tuple[List[dict], bool]:
    """Keep at most ``max_rows`` rows and report whether any were dropped."""
    if max_rows <= 0 or len(rows) <= max_rows:
        return rows, False
    return rows[:max_rows], True
