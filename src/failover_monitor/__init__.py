"""Node availability monitoring and resilient coordination-service access for Redis failover."""

from .coordination_client import CoordinationSessionClient, CreateMode
from .coordination_errors import CoordinationConnectionError, SessionExpiredError
from .manager import NodeStateListener
from .monitor_config import CoordinationConfig, WatcherConfig, get_coordination_config, get_watcher_config
from .node import NodeProbe, NodeRecord
from .node_probe import RedisPingProbe
from .node_state import NodeState
from .node_watcher import NodeHealthWatcher

__all__ = [
    "CoordinationConfig",
    "CoordinationConnectionError",
    "CoordinationSessionClient",
    "CreateMode",
    "NodeHealthWatcher",
    "NodeProbe",
    "NodeRecord",
    "NodeState",
    "NodeStateListener",
    "RedisPingProbe",
    "SessionExpiredError",
    "WatcherConfig",
    "get_coordination_config",
    "get_watcher_config",
]
