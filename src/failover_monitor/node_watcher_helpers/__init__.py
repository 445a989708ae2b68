"""Helpers backing :class:`~failover_monitor.node_watcher.NodeHealthWatcher`."""

from .lifecycle import DEFAULT_STOP_TIMEOUT_SECONDS, WatchLifecycle
from .poll_loop import NodePollLoop
from .transition_tracker import TransitionTracker

__all__ = [
    "DEFAULT_STOP_TIMEOUT_SECONDS",
    "NodePollLoop",
    "TransitionTracker",
    "WatchLifecycle",
]
