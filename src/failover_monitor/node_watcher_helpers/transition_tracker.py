"""Edge-triggered reporting of node availability."""

from __future__ import annotations

import logging
from typing import Optional

from ..manager import NodeStateListener
from ..node import NodeRecord
from ..node_state import NodeState

logger = logging.getLogger(__name__)

NOTIFY_ERRORS = (RuntimeError, ValueError, TypeError, KeyError)


class TransitionTracker:
    """
    Remembers the last state reported for a node and forwards only changes.

    No initial state is assumed, so the first observation is always reported.
    A report the manager rejects is not remembered and is retried on the next
    observation.
    """

    def __init__(self, node: NodeRecord, manager: NodeStateListener):
        self.node = node
        self.manager = manager
        self.last_reported: Optional[NodeState] = None

    def observe(self, state: NodeState) -> bool:
        """Report *state* if it differs from the last reported one; returns True when reported."""
        if state is self.last_reported:
            return False

        try:
            self.manager.notify_state_change(self.node, state)
        except NOTIFY_ERRORS:  # policy_guard: allow-silent-handler
            logger.exception("Failed to report %s as %s", self.node, state.value)
            return False

        previous = self.last_reported
        self.last_reported = state
        logger.info(
            "Node %s is %s (previously %s)",
            self.node,
            state.value,
            previous.value if previous else "unknown",
        )
        return True
