"""Interface the failover manager exposes to node health watchers."""

from typing import Protocol

from .node import NodeRecord
from .node_state import NodeState


class NodeStateListener(Protocol):
    """Receives availability transitions; expected to return promptly."""

    def notify_state_change(self, node: NodeRecord, state: NodeState) -> None: ...


__all__ = ["NodeStateListener"]
