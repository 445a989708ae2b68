"""
Configuration for the coordination client and node health watchers.

Values are loaded from the environment. Every field has an environment
variable; all but the coordination server list carry production defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Tuple

from .config import ConfigurationError, env_int, env_list, env_seconds

MAX_RECONNECTS = 3
DEFAULT_RECONNECT_BACKOFF_SECONDS = 2.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_WATCH_INTERVAL_SECONDS = 5.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0


def _require_servers() -> Tuple[str, ...]:
    servers = env_list("COORDINATION_SERVERS", required=True)
    if not servers:
        raise ConfigurationError.missing_value("COORDINATION_SERVERS")
    return servers


def _non_negative_int(name: str, default: int) -> int:
    value = env_int(name, or_value=default)
    if value is None or value < 0:
        raise ConfigurationError.invalid_value(name, value, "must be a non-negative integer")
    return value


def _positive_seconds(name: str, default: float) -> float:
    value = env_seconds(name, or_value=default)
    if value is None or value <= 0:
        raise ConfigurationError.invalid_value(name, value, "must be greater than zero")
    return value


@dataclass(frozen=True)
class CoordinationConfig:
    """
    Settings for :class:`~failover_monitor.coordination_client.CoordinationSessionClient`.

    Attributes:
        servers: Coordination service addresses (``host:port``)
        max_reconnects: Session rebuilds allowed per operation call
        reconnect_backoff_seconds: Pause between a rebuild and the retried call
        connect_timeout_seconds: Maximum time to wait for a new session
    """

    servers: Tuple[str, ...] = field(default_factory=_require_servers)
    max_reconnects: int = field(
        default_factory=partial(_non_negative_int, "COORDINATION_MAX_RECONNECTS", MAX_RECONNECTS)
    )
    reconnect_backoff_seconds: float = field(
        default_factory=partial(env_seconds, "COORDINATION_RECONNECT_BACKOFF_SECONDS", DEFAULT_RECONNECT_BACKOFF_SECONDS)
    )
    connect_timeout_seconds: float = field(
        default_factory=partial(_positive_seconds, "COORDINATION_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS)
    )


@dataclass(frozen=True)
class WatcherConfig:
    """Settings shared by node health watchers."""

    interval_seconds: float = field(
        default_factory=partial(_positive_seconds, "NODE_WATCH_INTERVAL_SECONDS", DEFAULT_WATCH_INTERVAL_SECONDS)
    )
    probe_timeout_seconds: float = field(
        default_factory=partial(_positive_seconds, "NODE_PROBE_TIMEOUT_SECONDS", DEFAULT_PROBE_TIMEOUT_SECONDS)
    )


def get_coordination_config() -> CoordinationConfig:
    """Build coordination client settings from the environment."""
    return CoordinationConfig()


def get_watcher_config() -> WatcherConfig:
    """Build watcher settings from the environment."""
    return WatcherConfig()


__all__ = [
    "CoordinationConfig",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "DEFAULT_RECONNECT_BACKOFF_SECONDS",
    "DEFAULT_WATCH_INTERVAL_SECONDS",
    "MAX_RECONNECTS",
    "WatcherConfig",
    "get_coordination_config",
    "get_watcher_config",
]
