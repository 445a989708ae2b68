"""Periodic probe loop for a single node."""

import asyncio
import logging

from ..node import NodeRecord
from ..node_probe import PROBE_ERRORS
from ..node_state import NodeState
from .transition_tracker import TransitionTracker

logger = logging.getLogger(__name__)


class NodePollLoop:
    """Probes one node on a fixed interval until shutdown is requested."""

    def __init__(
        self,
        node: NodeRecord,
        tracker: TransitionTracker,
        interval_seconds: float,
        shutdown_event: asyncio.Event,
    ):
        self.node = node
        self.tracker = tracker
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event
        self.probe_count = 0

    async def probe_once(self) -> NodeState:
        """Run the probe and translate its outcome; any probe error means unavailable."""
        self.probe_count += 1
        try:
            reachable = await self.node.ping()
        except PROBE_ERRORS as exc:  # Node unreachable  # policy_guard: allow-silent-handler
            logger.debug("Probe of %s failed: %s", self.node, exc)
            return NodeState.UNAVAILABLE
        except Exception:  # Unexpected probe failure  # policy_guard: allow-silent-handler
            logger.exception("Unexpected error probing %s", self.node)
            return NodeState.UNAVAILABLE
        return NodeState.from_reachable(bool(reachable))

    async def run(self) -> None:
        logger.debug("Health watch loop for %s started", self.node)

        while not self.shutdown_event.is_set():
            try:
                state = await self.probe_once()
                if self.shutdown_event.is_set():
                    break
                self.tracker.observe(state)
            except Exception:  # Keep watching  # policy_guard: allow-silent-handler
                logger.exception("Error in health watch loop for %s", self.node)

            # Wait for next poll or shutdown signal
            try:
                await asyncio.wait_for(self.shutdown_event.wait(), timeout=self.interval_seconds)
                break
            except asyncio.TimeoutError:  # policy_guard: allow-silent-handler
                continue

        logger.debug("Health watch loop for %s stopped", self.node)
