"""Opening and discarding coordination sessions."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, Sequence

from kazoo.client import KazooClient

from ..coordination_errors import SESSION_CLOSE_ERRORS

logger = logging.getLogger(__name__)


class SessionHandle(Protocol):
    """Surface of :class:`kazoo.client.KazooClient` used by the coordination client."""

    @property
    def connected(self) -> bool: ...

    def add_listener(self, listener: Callable[[str], Any]) -> None: ...

    def remove_listener(self, listener: Callable[[str], Any]) -> None: ...

    def get(self, path: str, watch: Optional[Callable[..., Any]] = None) -> Any: ...

    def set(self, path: str, value: bytes, version: int = -1) -> Any: ...

    def create(self, path: str, value: bytes = b"", **kwargs: Any) -> str: ...

    def exists(self, path: str, watch: Optional[Callable[..., Any]] = None) -> Any: ...

    def delete(self, path: str, version: int = -1, recursive: bool = False) -> Any: ...

    def get_children(self, path: str, watch: Optional[Callable[..., Any]] = None) -> Any: ...

    def stop(self) -> None: ...

    def close(self) -> None: ...


SessionFactory = Callable[[Sequence[str]], SessionHandle]


def open_kazoo_session(servers: Sequence[str], *, timeout: float) -> KazooClient:
    """Start a kazoo client against *servers*, waiting up to *timeout* seconds to connect."""
    client = KazooClient(hosts=",".join(servers), timeout=timeout)
    client.start(timeout=timeout)
    return client


def close_session(handle: SessionHandle) -> None:
    """Stop and close *handle*, logging and discarding any failure."""
    for step in (handle.stop, handle.close):
        try:
            step()
        except SESSION_CLOSE_ERRORS as exc:  # Best-effort cleanup operation  # policy_guard: allow-silent-handler
            logger.debug("Ignoring error while closing coordination session %r: %s", handle, exc)


__all__ = ["SessionFactory", "SessionHandle", "close_session", "open_kazoo_session"]
