"""Shared utilities for SQL dialect handling."""

from typing import Optional

from common.config.env import get_env_str

DEFAULT_DIALECT = "mysql"

# MariaDB speaks the MySQL grammar as far as sqlglot is concerned.
_DIALECT_ALIASES = {
    "mysql": "mysql",
    "mariadb": "mysql",
    "maria": "mysql",
    "tidb": "mysql",
}


def normalize_sqlglot_dialect(dialect: Optional[str]) -> str:
    """Normalize a dialect name for use with sqlglot.

    Args:
        dialect: The dialect name to normalize (e.g., 'MySQL', 'MariaDB').

    Returns:
        A normalized lowercase string compatible with sqlglot.
    """
    if not dialect:
        return DEFAULT_DIALECT

    d = dialect.lower().strip()
    return _DIALECT_ALIASES.get(d, d)


def get_configured_dialect() -> str:
    """Return the sqlglot read dialect selected by SQL_DIALECT."""
    return normalize_sqlglot_dialect(get_env_str("SQL_DIALECT", DEFAULT_DIALECT))
