"""Tests for WatchLifecycle."""

import asyncio

import pytest

from failover_monitor.node_watcher_helpers.lifecycle import WatchLifecycle
from failover_monitor.node_watcher_helpers.poll_loop import NodePollLoop
from failover_monitor.node_watcher_helpers.transition_tracker import TransitionTracker
from tests.helpers.node_fakes import LightNodeManager, StubProbe, make_node


class HangingProbe:
    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = False

    async def ping(self, node):
        self.started.set()
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return True


def _lifecycle_for(probe, *, stop_timeout_seconds=1.0):
    node = make_node(probe)
    shutdown_event = asyncio.Event()
    poll_loop = NodePollLoop(node, TransitionTracker(node, LightNodeManager()), 0.01, shutdown_event)
    return WatchLifecycle(poll_loop, shutdown_event, stop_timeout_seconds=stop_timeout_seconds)


@pytest.mark.asyncio
async def test_start_is_idempotent():
    lifecycle = _lifecycle_for(StubProbe())

    await lifecycle.start()
    first_task = lifecycle._task
    await lifecycle.start()

    assert lifecycle._task is first_task
    await lifecycle.stop()


@pytest.mark.asyncio
async def test_stop_waits_for_loop_to_exit():
    lifecycle = _lifecycle_for(StubProbe())
    await lifecycle.start()
    task = lifecycle._task

    await lifecycle.stop()

    assert task.done()
    assert not lifecycle.is_running()
    assert lifecycle._task is None


@pytest.mark.asyncio
async def test_stop_cancels_loop_stuck_in_probe():
    probe = HangingProbe()
    lifecycle = _lifecycle_for(probe, stop_timeout_seconds=0.05)
    await lifecycle.start()
    await asyncio.wait_for(probe.started.wait(), timeout=1.0)

    await lifecycle.stop()

    assert probe.cancelled
    assert not lifecycle.is_running()


@pytest.mark.asyncio
async def test_can_restart_after_stop():
    probe = StubProbe()
    lifecycle = _lifecycle_for(probe)

    await lifecycle.start()
    await lifecycle.stop()
    await lifecycle.start()

    assert lifecycle.is_running()
    await lifecycle.stop()


@pytest.mark.asyncio
async def test_stop_does_not_reraise_loop_errors():
    class FailingLoop(NodePollLoop):
        async def run(self):
            raise LookupError("loop failure")

    node = make_node(StubProbe())
    shutdown_event = asyncio.Event()
    poll_loop = FailingLoop(node, TransitionTracker(node, LightNodeManager()), 0.01, shutdown_event)
    lifecycle = WatchLifecycle(poll_loop, shutdown_event)
    await lifecycle.start()
    await asyncio.sleep(0)

    await lifecycle.stop()

    assert not lifecycle.is_running()
    assert lifecycle._task is None
