"""
Coordination service error classification.

Only an expired session is worth a rebuild-and-retry; every other kazoo
failure reaches the caller on first occurrence.
"""

from typing import Tuple, Type

from kazoo.exceptions import KazooException, SessionExpiredError
from kazoo.handlers.threading import KazooTimeoutError

ExceptionTuple = Tuple[Type[BaseException], ...]

SESSION_EXPIRED_ERRORS: ExceptionTuple = (SessionExpiredError,)

# Errors that can surface while opening or configuring a fresh session.
SESSION_SETUP_ERRORS: ExceptionTuple = (KazooException, KazooTimeoutError)

# Errors tolerated while discarding a session that is being replaced.
SESSION_CLOSE_ERRORS: ExceptionTuple = (KazooException, KazooTimeoutError, OSError, RuntimeError)


class CoordinationConnectionError(ConnectionError):
    """Raised when a fresh coordination session cannot be established."""

    @classmethod
    def not_connected(cls, handle: object) -> "CoordinationConnectionError":
        return cls(f"Not in connected state, client: {handle!r}")

    @classmethod
    def connect_failed(cls, exc: BaseException) -> "CoordinationConnectionError":
        return cls(f"Failed to connect, error: {exc}")


__all__ = [
    "CoordinationConnectionError",
    "SESSION_CLOSE_ERRORS",
    "SESSION_EXPIRED_ERRORS",
    "SESSION_SETUP_ERRORS",
    "SessionExpiredError",
]
