"""
Canonical availability states for monitored data-store nodes.
"""

from enum import Enum


class NodeState(Enum):
    """Availability of a node as observed by its health watcher."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @classmethod
    def from_reachable(cls, reachable: bool) -> "NodeState":
        return cls.AVAILABLE if reachable else cls.UNAVAILABLE
