"""Typed environment variable parsing helpers."""

import os
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

_TRUTHY = frozenset({"true", "1", "yes", "on"})
_FALSEY = frozenset({"false", "0", "no", "off", ""})


def _read(
    name: str,
    default: Optional[T],
    required: bool,
    convert: Callable[[str], T],
) -> Optional[T]:
    value = os.getenv(name)
    if value is None:
        if required:
            raise KeyError(f"Environment variable '{name}' is required but not set.")
        return default
    return convert(value)


def get_env_str(name: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """Get an environment variable as a string."""
    return _read(name, default, required, lambda value: value)


def get_env_int(name: str, default: Optional[int] = None, required: bool = False) -> Optional[int]:
    """Get an environment variable as an integer."""

    def _to_int(value: str) -> int:
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"Environment variable '{name}' must be an integer, got '{value}'.")

    return _read(name, default, required, _to_int)


def get_env_bool(
    name: str, default: Optional[bool] = None, required: bool = False
) -> Optional[bool]:
    """Get an environment variable as a boolean.

    Truthy: true, 1, yes, on
    Falsey: false, 0, no, off, (empty string)
    """

    def _to_bool(value: str) -> bool:
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSEY:
            return False
        raise ValueError(f"Environment variable '{name}' must be a boolean, got '{value}'.")

    return _read(name, default, required, _to_bool)
