from dataclasses import dataclass
from typing import Optional

from common.config.env import get_env_int, get_env_str


@dataclass(frozen=True)
class MysqlConfig:
    """Connection settings for the MySQL server being browsed."""

    host: str
    port: int = 3306
    user: Optional[str] = None
    password: Optional[str] = None
    db_name: Optional[str] = None
    connect_timeout_seconds: int = 10

    @classmethod
    def from_env(cls) -> "MysqlConfig":
        """Load MySQL connection config from environment variables."""
        return cls(
            host=get_env_str("DB_HOST", required=True),
            port=get_env_int("DB_PORT", 3306),
            user=get_env_str("DB_USER"),
            password=get_env_str("DB_PASSWORD"),
            db_name=get_env_str("DB_NAME"),
            connect_timeout_seconds=get_env_int("DB_CONNECT_TIMEOUT_SECS", 10),
        )
