"""Tests for WatchRegistry."""

import pytest
from kazoo.protocol.states import EventType, KeeperState, WatchedEvent

from failover_monitor.coordination_client_helpers.watch_registry import WatchRegistry


def test_tracked_registration_is_pending_until_fired():
    registry = WatchRegistry()
    events = []
    registration = registry.new_registration("/nodes", events.append)

    registry.track(registration)
    assert registry.pending() == [registration]

    registration("changed")

    assert events == ["changed"]
    assert registry.pending() == []
    assert len(registry) == 0


def test_registration_fires_callback_only_once():
    registry = WatchRegistry()
    events = []
    registration = registry.new_registration("/nodes", events.append)
    registry.track(registration)

    registration("first")
    registration("second")

    assert events == ["first"]


def test_registration_that_fired_before_tracking_is_not_tracked():
    registry = WatchRegistry()
    registration = registry.new_registration("/nodes", lambda event: None)

    registration("early")
    registry.track(registration)

    assert registry.pending() == []


def test_tracking_twice_keeps_a_single_entry():
    registry = WatchRegistry()
    registration = registry.new_registration("/nodes", lambda event: None)

    registry.track(registration)
    registry.track(registration)

    assert len(registry) == 1


@pytest.mark.parametrize("keeper_state", [KeeperState.CONNECTING, KeeperState.EXPIRED_SESSION, KeeperState.CLOSED])
def test_session_reset_event_keeps_registration_pending(keeper_state):
    registry = WatchRegistry()
    events = []
    registration = registry.new_registration("/nodes", events.append)
    registry.track(registration)

    registration(WatchedEvent(EventType.NONE, keeper_state, "/nodes"))

    assert events == []
    assert registry.pending() == [registration]

    change = WatchedEvent(EventType.CHANGED, KeeperState.CONNECTED, "/nodes")
    registration(change)

    assert events == [change]
    assert registry.pending() == []
