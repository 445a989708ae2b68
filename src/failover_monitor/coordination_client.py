"""
Coordination service client that survives session expiry.

A thin wrapper over a kazoo session: every operation runs against the current
session and, when the coordination service reports the session as expired,
the session is rebuilt and the operation retried a bounded number of times.
Watches armed through this client are re-armed on every rebuilt session.
"""

from __future__ import annotations

import time
from enum import Enum
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .coordination_client_helpers import (
    SessionFactory,
    SessionHandle,
    SessionHolder,
    WatchCallback,
    WatchRegistry,
    open_kazoo_session,
    perform_with_reconnect,
)
from .monitor_config import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_RECONNECT_BACKOFF_SECONDS,
    MAX_RECONNECTS,
    CoordinationConfig,
)


class CreateMode(Enum):
    """Persistence flavours for nodes created through the client."""

    PERSISTENT = "persistent"
    EPHEMERAL = "ephemeral"
    PERSISTENT_SEQUENTIAL = "persistent_sequential"
    EPHEMERAL_SEQUENTIAL = "ephemeral_sequential"

    @property
    def ephemeral(self) -> bool:
        return self in (CreateMode.EPHEMERAL, CreateMode.EPHEMERAL_SEQUENTIAL)

    @property
    def sequence(self) -> bool:
        return self in (CreateMode.PERSISTENT_SEQUENTIAL, CreateMode.EPHEMERAL_SEQUENTIAL)


class CoordinationSessionClient:
    """
    Shared handle to the coordination service.

    One instance is created per process and shared by every component that
    needs coordination access. Callers never implement retry themselves:
    expired sessions are rebuilt here, and any other failure propagates on
    first occurrence.
    """

    MAX_RECONNECTS = MAX_RECONNECTS

    def __init__(
        self,
        servers: Sequence[str],
        *,
        max_reconnects: int = MAX_RECONNECTS,
        reconnect_backoff_seconds: float = DEFAULT_RECONNECT_BACKOFF_SECONDS,
        connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        session_factory: Optional[SessionFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not servers:
            raise ValueError("At least one coordination server is required")
        self.servers: Tuple[str, ...] = tuple(servers)
        self.max_reconnects = max_reconnects
        self.reconnect_backoff_seconds = reconnect_backoff_seconds
        self._sleep = sleep
        factory = session_factory or partial(open_kazoo_session, timeout=connect_timeout_seconds)
        self._watches = WatchRegistry()
        self._holder = SessionHolder(self.servers, factory, self._watches)
        self._holder.rebuild()

    @classmethod
    def from_config(cls, config: CoordinationConfig, **kwargs: Any) -> "CoordinationSessionClient":
        """Build a client from :class:`CoordinationConfig` settings."""
        return cls(
            config.servers,
            max_reconnects=config.max_reconnects,
            reconnect_backoff_seconds=config.reconnect_backoff_seconds,
            connect_timeout_seconds=config.connect_timeout_seconds,
            **kwargs,
        )

    @property
    def session(self) -> SessionHandle:
        """The session handle currently in use."""
        return self._holder.current()

    @property
    def pending_watch_count(self) -> int:
        return len(self._watches)

    def read(self, path: str) -> Tuple[bytes, Any]:
        """Return ``(data, stat)`` for *path*."""
        return self._perform(lambda handle: handle.get(path))

    def write(self, path: str, data: bytes) -> Any:
        """Replace the data stored at *path*; returns the new stat."""
        return self._perform(lambda handle: handle.set(path, data))

    def create_node(
        self,
        path: str,
        data: bytes = b"",
        mode: CreateMode = CreateMode.PERSISTENT,
        *,
        makepath: bool = False,
    ) -> str:
        """Create a node at *path* and return its actual path."""
        return self._perform(
            lambda handle: handle.create(
                path,
                data,
                ephemeral=mode.ephemeral,
                sequence=mode.sequence,
                makepath=makepath,
            )
        )

    def stat(self, path: str) -> Optional[Any]:
        """Return the stat for *path*, or ``None`` when it does not exist."""
        return self._perform(lambda handle: handle.exists(path))

    def watch(self, path: str, callback: WatchCallback) -> Optional[Any]:
        """
        Arm a one-shot watch on *path*.

        The callback fires at most once, when the coordination service reports
        a change to *path*. Until then the watch is re-armed on every rebuilt
        session. Returns the current stat of *path* (``None`` if absent).
        """
        registration = self._watches.new_registration(path, callback)
        stat = self._perform(lambda handle: handle.exists(path, watch=registration))
        self._watches.track(registration)
        return stat

    def delete(self, path: str, *, recursive: bool = False) -> Any:
        """Remove the node at *path*."""
        return self._perform(lambda handle: handle.delete(path, recursive=recursive))

    def get_children(self, path: str) -> List[str]:
        """List the child node names of *path*."""
        return self._perform(lambda handle: handle.get_children(path))

    def rebuild(self) -> None:
        """Replace the current session with a freshly connected one."""
        self._holder.rebuild()

    def close(self) -> None:
        """Close the session for good; idempotent."""
        self._holder.close()

    def _perform(self, operation: Callable[[SessionHandle], Any]) -> Any:
        return perform_with_reconnect(
            operation,
            self._holder,
            max_reconnects=self.max_reconnects,
            backoff_seconds=self.reconnect_backoff_seconds,
            sleep=self._sleep,
        )


__all__ = ["CoordinationSessionClient", "CreateMode"]
