"""Redis PING probe for monitored nodes."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import redis.asyncio
from redis.exceptions import RedisError

from .monitor_config import DEFAULT_PROBE_TIMEOUT_SECONDS, WatcherConfig
from .node import NodeRecord

# Failures that mean the node is unreachable.
PROBE_ERRORS = (RedisError, asyncio.TimeoutError, OSError, RuntimeError, ValueError)


class RedisPingProbe:
    """Checks node reachability with a Redis ``PING`` on a short-lived client."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        client_factory: Optional[Callable[..., Any]] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self._client_factory = client_factory or redis.asyncio.Redis

    @classmethod
    def from_config(cls, config: WatcherConfig) -> "RedisPingProbe":
        return cls(timeout_seconds=config.probe_timeout_seconds)

    async def ping(self, node: NodeRecord) -> bool:
        client = self._client_factory(
            host=node.host,
            port=node.port,
            socket_timeout=self.timeout_seconds,
            socket_connect_timeout=self.timeout_seconds,
        )
        try:
            return bool(await asyncio.wait_for(client.ping(), timeout=self.timeout_seconds))
        finally:
            await client.aclose()


__all__ = ["PROBE_ERRORS", "RedisPingProbe"]
