"""Tests for NodePollLoop."""

import asyncio

import pytest
from redis.exceptions import ResponseError

from failover_monitor.node_state import NodeState
from failover_monitor.node_watcher_helpers.poll_loop import NodePollLoop
from failover_monitor.node_watcher_helpers.transition_tracker import TransitionTracker
from tests.helpers.node_fakes import LightNodeManager, StubProbe, make_node


class ValueProbe:
    def __init__(self, value):
        self.value = value

    async def ping(self, node):
        return self.value


def _loop_for(probe, *, interval=0.01, manager=None):
    node = make_node(probe)
    tracker = TransitionTracker(node, manager or LightNodeManager())
    return NodePollLoop(node, tracker, interval, asyncio.Event())


@pytest.mark.asyncio
async def test_successful_probe_means_available():
    loop = _loop_for(StubProbe(available=True))

    assert await loop.probe_once() is NodeState.AVAILABLE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ConnectionRefusedError(), asyncio.TimeoutError(), ResponseError("LOADING"), OSError("unreachable")],
)
async def test_probe_errors_mean_unavailable(error):
    loop = _loop_for(StubProbe(script=[error]))

    assert await loop.probe_once() is NodeState.UNAVAILABLE


@pytest.mark.asyncio
async def test_falsy_probe_result_means_unavailable():
    loop = _loop_for(ValueProbe(False))

    assert await loop.probe_once() is NodeState.UNAVAILABLE


@pytest.mark.asyncio
async def test_run_exits_when_shutdown_is_requested():
    class StopAfterFirstReport(LightNodeManager):
        def notify_state_change(self, node, state):
            super().notify_state_change(node, state)
            poll_loop.shutdown_event.set()

    manager = StopAfterFirstReport()
    poll_loop = _loop_for(StubProbe(available=True), interval=10, manager=manager)

    await asyncio.wait_for(poll_loop.run(), timeout=1.0)

    assert poll_loop.probe_count == 1
    assert [state for _, state in manager.notifications] == [NodeState.AVAILABLE]


@pytest.mark.asyncio
async def test_run_does_not_probe_when_already_shut_down():
    probe = StubProbe(available=True)
    poll_loop = _loop_for(probe)
    poll_loop.shutdown_event.set()

    await poll_loop.run()

    assert probe.calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [LookupError("dns table miss"), KeyError("node"), AttributeError("ping")])
async def test_unexpected_ping_errors_mean_unavailable(error):
    loop = _loop_for(StubProbe(script=[error]))

    assert await loop.probe_once() is NodeState.UNAVAILABLE


@pytest.mark.asyncio
async def test_ping_cancellation_is_not_absorbed():
    loop = _loop_for(StubProbe(script=[asyncio.CancelledError()]))

    with pytest.raises(asyncio.CancelledError):
        await loop.probe_once()


@pytest.mark.asyncio
async def test_run_keeps_polling_after_manager_failure():
    class BrokenOnceManager(LightNodeManager):
        def __init__(self):
            super().__init__()
            self.failed = False

        def notify_state_change(self, node, state):
            if not self.failed:
                self.failed = True
                raise LookupError("manager table miss")
            super().notify_state_change(node, state)
            poll_loop.shutdown_event.set()

    manager = BrokenOnceManager()
    poll_loop = _loop_for(StubProbe(available=True), manager=manager)

    await asyncio.wait_for(poll_loop.run(), timeout=1.0)

    assert poll_loop.probe_count == 2
    assert [state for _, state in manager.notifications] == [NodeState.AVAILABLE]
