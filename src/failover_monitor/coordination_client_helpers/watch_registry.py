"""Bookkeeping for one-shot watches that must survive session rebuilds."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List

from kazoo.protocol.states import EventType

WatchCallback = Callable[[Any], Any]


@dataclass(eq=False)
class WatchRegistration:
    """
    A watch armed on *path*; fires *callback* at most once.

    kazoo delivers ``EventType.NONE`` to every watcher when a session is
    suspended, expires or is closed. Those are not changes to *path*, so the
    registration stays pending and is re-armed on the next session.
    """

    path: str
    callback: WatchCallback
    registry: "WatchRegistry" = field(repr=False)
    fired: bool = False

    def __call__(self, event: Any) -> Any:
        if getattr(event, "type", None) == EventType.NONE:
            return None
        if not self.registry.mark_fired(self):
            return None
        return self.callback(event)


class WatchRegistry:
    """Tracks watches that have been armed but have not fired yet."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: List[WatchRegistration] = []

    def new_registration(self, path: str, callback: WatchCallback) -> WatchRegistration:
        return WatchRegistration(path=path, callback=callback, registry=self)

    def track(self, registration: WatchRegistration) -> None:
        """Remember an armed registration unless it already fired."""
        with self._lock:
            if registration.fired or registration in self._pending:
                return
            self._pending.append(registration)

    def mark_fired(self, registration: WatchRegistration) -> bool:
        """Flag *registration* as fired; returns False if it had fired before."""
        with self._lock:
            if registration.fired:
                return False
            registration.fired = True
            if registration in self._pending:
                self._pending.remove(registration)
            return True

    def pending(self) -> List[WatchRegistration]:
        with self._lock:
            return list(self._pending)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


__all__ = ["WatchCallback", "WatchRegistration", "WatchRegistry"]
