"""Configuration helpers."""

from common.config.env import get_env_bool, get_env_int, get_env_str

__all__ = ["get_env_bool", "get_env_int", "get_env_str"]
