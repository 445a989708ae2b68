"""Tests for session opening and best-effort closing."""

from kazoo.exceptions import ConnectionLoss

from failover_monitor.coordination_client_helpers import session_factory
from failover_monitor.coordination_client_helpers.session_factory import close_session, open_kazoo_session


class RecordingKazooClient:
    instances = []

    def __init__(self, hosts, timeout):
        self.hosts = hosts
        self.timeout = timeout
        self.start_timeout = None
        RecordingKazooClient.instances.append(self)

    def start(self, timeout):
        self.start_timeout = timeout


class ClosableHandle:
    def __init__(self, stop_error=None, close_error=None):
        self.stop_error = stop_error
        self.close_error = close_error
        self.steps = []

    def stop(self):
        self.steps.append("stop")
        if self.stop_error:
            raise self.stop_error

    def close(self):
        self.steps.append("close")
        if self.close_error:
            raise self.close_error


def test_open_kazoo_session_joins_servers_and_starts(monkeypatch):
    RecordingKazooClient.instances = []
    monkeypatch.setattr(session_factory, "KazooClient", RecordingKazooClient)

    client = open_kazoo_session(("zk1:2181", "zk2:2181"), timeout=4.5)

    assert client.hosts == "zk1:2181,zk2:2181"
    assert client.timeout == 4.5
    assert client.start_timeout == 4.5


def test_close_session_stops_then_closes():
    handle = ClosableHandle()

    close_session(handle)

    assert handle.steps == ["stop", "close"]


def test_close_session_swallows_errors_and_still_closes():
    handle = ClosableHandle(stop_error=ConnectionLoss(), close_error=OSError("socket gone"))

    close_session(handle)

    assert handle.steps == ["stop", "close"]
