"""Lock-guarded ownership of the current coordination session."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Sequence, Tuple

from kazoo.exceptions import ConnectionClosedError
from kazoo.protocol.states import KazooState

from ..coordination_errors import SESSION_SETUP_ERRORS, CoordinationConnectionError
from .session_factory import SessionFactory, SessionHandle, close_session
from .watch_registry import WatchRegistry

logger = logging.getLogger(__name__)


class SessionHolder:
    """
    Owns the single current session handle and rebuilds it on demand.

    Rebuilds are serialized by ``_lock``. The previous handle stays current
    until the new one is verified and swapped in, so :meth:`current` always
    returns either the old or the new session. Callers that hit the retired
    session get kazoo's ``ConnectionClosedError`` (a ``SessionExpiredError``)
    and go through the normal reconnect path.

    Expiry notifications from kazoo are handed to a single-worker executor
    that calls :meth:`rebuild`, keeping kazoo's event thread free.
    """

    def __init__(
        self,
        servers: Sequence[str],
        session_factory: SessionFactory,
        watch_registry: Optional[WatchRegistry] = None,
    ):
        self.servers: Tuple[str, ...] = tuple(servers)
        self._session_factory = session_factory
        self.watch_registry = watch_registry if watch_registry is not None else WatchRegistry()
        self._lock = threading.Lock()
        self._handle: Optional[SessionHandle] = None
        self._listener: Optional[Callable[[str], None]] = None
        self._retired = False
        self._closed = False
        self._rebuild_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="coordination-rebuild")

    def current(self) -> SessionHandle:
        """Return the current session handle."""
        handle = self._handle
        if handle is None:
            raise ConnectionClosedError("Coordination session not established")
        return handle

    def rebuild(self) -> SessionHandle:
        """Retire the current session and open, verify and arm a new one."""
        with self._lock:
            if self._closed:
                raise CoordinationConnectionError("Coordination client is closed")
            self._retire_current()
            try:
                handle = self._session_factory(self.servers)
            except SESSION_SETUP_ERRORS as exc:
                raise CoordinationConnectionError.connect_failed(exc) from exc

            try:
                listener = self._arm(handle)
            except (CoordinationConnectionError, *SESSION_SETUP_ERRORS) as exc:
                close_session(handle)
                if isinstance(exc, CoordinationConnectionError):
                    raise
                raise CoordinationConnectionError.connect_failed(exc) from exc

            self._handle = handle
            self._listener = listener
            self._retired = False
            logger.info("Communicating with coordination servers %s", ",".join(self.servers))
            return handle

    def request_rebuild(self) -> Optional[Future]:
        """Queue a rebuild on the background worker."""
        return self._submit(self.rebuild, "rebuild")

    def rearm_watches(self, handle: SessionHandle) -> int:
        """Re-arm pending watches on *handle* if it is still the current session."""
        with self._lock:
            if self._closed or self._retired or self._handle is not handle:
                return 0
            return self._rearm_pending(handle)

    def close(self) -> None:
        """Retire the session permanently; later rebuilds are refused."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._retire_current()
        self._rebuild_executor.shutdown(wait=False)
        logger.info("Closed coordination session for servers %s", ",".join(self.servers))

    def _submit(self, task: Callable[..., object], label: str, *args: object) -> Optional[Future]:
        if self._closed:
            logger.debug("Ignoring %s request for closed coordination client", label)
            return None
        try:
            future = self._rebuild_executor.submit(task, *args)
        except RuntimeError:  # Executor shut down by close()  # policy_guard: allow-silent-handler
            logger.debug("Ignoring %s request for closed coordination client", label)
            return None
        future.add_done_callback(_log_background_failure)
        return future

    def _retire_current(self) -> None:
        """Detach and close the current handle without un-publishing it."""
        handle = self._handle
        if handle is None or self._retired:
            return
        if self._listener is not None:
            try:
                handle.remove_listener(self._listener)
            except (KeyError, ValueError):  # Listener already gone  # policy_guard: allow-silent-handler
                logger.debug("Expiry listener already removed from %r", handle)
        self._listener = None
        self._retired = True
        close_session(handle)

    def _arm(self, handle: SessionHandle) -> Callable[[str], None]:
        """Verify *handle*, attach the state listener and re-arm pending watches."""
        if not handle.connected:
            raise CoordinationConnectionError.not_connected(handle)
        listener = self._build_state_listener(handle)
        handle.add_listener(listener)
        self._rearm_pending(handle)
        return listener

    def _rearm_pending(self, handle: SessionHandle) -> int:
        pending = self.watch_registry.pending()
        for registration in pending:
            handle.exists(registration.path, watch=registration)
        if pending:
            logger.info("Re-armed %d coordination watch(es)", len(pending))
        return len(pending)

    def _build_state_listener(self, handle: SessionHandle) -> Callable[[str], None]:
        suspended = False

        def on_state_change(state: str) -> None:
            nonlocal suspended
            if self._handle is not handle:
                return
            if state == KazooState.LOST:
                logger.info("Coordination session expired, scheduling rebuild")
                self.request_rebuild()
            elif state == KazooState.SUSPENDED:
                suspended = True
            elif state == KazooState.CONNECTED and suspended:
                # kazoo drops its watchers on suspension
                suspended = False
                self._submit(self.rearm_watches, "watch re-arm", handle)

        return on_state_change


def _log_background_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Background coordination session task failed", exc_info=exc)


__all__ = ["SessionHolder"]
