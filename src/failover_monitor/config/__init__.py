"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import (
    env_bool,
    env_int,
    env_list,
    env_seconds,
    env_str,
)

__all__ = [
    "ConfigurationError",
    "env_bool",
    "env_int",
    "env_list",
    "env_seconds",
    "env_str",
]
