"""Helpers backing :class:`~failover_monitor.coordination_client.CoordinationSessionClient`."""

from .reconnect import perform_with_reconnect
from .session_factory import SessionFactory, SessionHandle, close_session, open_kazoo_session
from .session_holder import SessionHolder
from .watch_registry import WatchCallback, WatchRegistration, WatchRegistry

__all__ = [
    "SessionFactory",
    "SessionHandle",
    "SessionHolder",
    "WatchCallback",
    "WatchRegistration",
    "WatchRegistry",
    "close_session",
    "open_kazoo_session",
    "perform_with_reconnect",
]
