"""
Per-node health watcher.

Each watcher probes one node on a fixed interval in its own asyncio task and
tells the manager only about genuine availability transitions.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from .manager import NodeStateListener
from .monitor_config import WatcherConfig
from .node import NodeRecord
from .node_state import NodeState
from .node_watcher_helpers import (
    DEFAULT_STOP_TIMEOUT_SECONDS,
    NodePollLoop,
    TransitionTracker,
    WatchLifecycle,
)


class NodeHealthWatcher:
    """
    Watches a single node and reports availability changes to a manager.

    This is a slim coordinator that delegates probing to :class:`NodePollLoop`,
    edge detection to :class:`TransitionTracker` and task management to
    :class:`WatchLifecycle`.
    """

    def __init__(
        self,
        manager: NodeStateListener,
        node: NodeRecord,
        interval_seconds: float,
        *,
        stop_timeout_seconds: float = DEFAULT_STOP_TIMEOUT_SECONDS,
    ):
        """
        Initialize the watcher.

        Args:
            manager: Receiver of ``notify_state_change`` calls
            node: Node to probe
            interval_seconds: Delay between consecutive probes
            stop_timeout_seconds: Grace period for the loop to exit on shutdown
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        self.manager = manager
        self.node = node
        self.interval_seconds = interval_seconds

        self._shutdown_event = asyncio.Event()
        self._tracker = TransitionTracker(node, manager)
        self._poll_loop = NodePollLoop(node, self._tracker, interval_seconds, self._shutdown_event)
        self._lifecycle = WatchLifecycle(
            self._poll_loop,
            self._shutdown_event,
            stop_timeout_seconds=stop_timeout_seconds,
        )

    @classmethod
    def from_config(cls, manager: NodeStateListener, node: NodeRecord, config: WatcherConfig) -> "NodeHealthWatcher":
        return cls(manager, node, config.interval_seconds)

    @property
    def last_reported_state(self) -> Optional[NodeState]:
        """State most recently delivered to the manager, if any."""
        return self._tracker.last_reported

    @property
    def probe_count(self) -> int:
        return self._poll_loop.probe_count

    async def watch(self) -> None:
        """Start polling in the background; returns once the loop is scheduled."""
        await self._lifecycle.start()

    async def shutdown(self) -> None:
        """Stop polling; safe to call repeatedly and from any task."""
        await self._lifecycle.stop()

    def is_running(self) -> bool:
        return self._lifecycle.is_running()


__all__ = ["NodeHealthWatcher"]
