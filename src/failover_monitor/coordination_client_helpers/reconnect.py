"""Bounded rebuild-and-retry for operations that hit an expired session."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ..coordination_errors import SESSION_EXPIRED_ERRORS
from .session_factory import SessionHandle
from .session_holder import SessionHolder

logger = logging.getLogger(__name__)

T = TypeVar("T")


def perform_with_reconnect(
    operation: Callable[[SessionHandle], T],
    holder: SessionHolder,
    *,
    max_reconnects: int,
    backoff_seconds: float,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run *operation* against the current session, rebuilding on expiry.

    A session that is missing or already retired counts as expired, so a
    failed background rebuild is repaired by the next call.

    Args:
        operation: Callable invoked with the current session handle
        holder: Owner of the session handle
        max_reconnects: Rebuilds allowed for this call
        backoff_seconds: Pause between a rebuild and the retried call
        sleep: Blocking sleep function

    Returns:
        The result of *operation*

    Raises:
        SessionExpiredError: If the session is still expired after
            ``max_reconnects`` rebuilds; the last error is re-raised unchanged.
    """
    reconnects = 0
    while True:
        try:
            return operation(holder.current())
        except SESSION_EXPIRED_ERRORS:
            logger.info("Coordination client session expired, rebuilding client.")
            if reconnects >= max_reconnects:
                raise
            reconnects += 1
            holder.rebuild()
            sleep(backoff_seconds)


__all__ = ["perform_with_reconnect"]
