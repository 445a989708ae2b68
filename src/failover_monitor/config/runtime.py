from __future__ import annotations

"""Runtime helpers for working with environment-backed configuration."""


import os
from typing import Callable, Sequence, TypeVar

from .errors import ConfigurationError
from .list_normalizer import ListNormalizer

T = TypeVar("T")

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}


def env_str(
    name: str,
    or_value: str | None = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> str | None:
    """Fetch an environment variable as a string with validation."""

    value = os.getenv(name)
    if value is not None and strip:
        value = value.strip()

    if value is None or (not allow_blank and value == ""):
        if required:
            raise ConfigurationError.missing_value(name, "required environment variable")
        return or_value
    return value


def _env_converted(
    name: str,
    or_value: T | None,
    required: bool,
    convert: Callable[[str], T],
    expected: str,
) -> T | None:
    raw = env_str(name)
    if raw is None:
        if required and or_value is None:
            raise ConfigurationError.missing_value(name, "required environment variable")
        return or_value
    try:
        return convert(raw)
    except ValueError as exc:
        raise ConfigurationError.invalid_format(name, raw, expected) from exc


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def env_int(name: str, or_value: int | None = None, *, required: bool = False) -> int | None:
    """Fetch an environment variable and coerce it to ``int``."""
    return _env_converted(name, or_value, required, int, "an integer")


def env_bool(name: str, or_value: bool | None = None, *, required: bool = False) -> bool | None:
    """Fetch an environment variable and coerce it to ``bool``."""
    return _env_converted(name, or_value, required, _parse_bool, f"one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}")


def env_seconds(name: str, or_value: float | None = None, *, required: bool = False) -> float | None:
    """Fetch a non-negative duration stored as (possibly fractional) seconds."""

    value = _env_converted(name, or_value, required, float, "a number of seconds")
    if value is not None and value < 0:
        raise ConfigurationError.invalid_value(name, value, "durations must be non-negative")
    return value


def env_list(
    name: str,
    *,
    or_value: Sequence[str] | None = None,
    separator: str = ",",
    strip_items: bool = True,
    unique: bool = True,
    required: bool = False,
) -> tuple[str, ...] | None:
    """Fetch a delimited list such as ``COORDINATION_SERVERS`` from the environment."""

    raw = env_str(name)
    if raw is None:
        if required and not or_value:
            raise ConfigurationError.missing_value(name, "required environment variable")
        return None if or_value is None else tuple(or_value)

    items = tuple(ListNormalizer.split_and_normalize(raw, separator, strip_items))
    if not items and required:
        raise ConfigurationError.missing_value(name, "expected at least one value")
    return ListNormalizer.deduplicate_preserving_order(items) if unique else items
