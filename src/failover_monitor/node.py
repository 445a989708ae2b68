"""Monitored node identity and the probe contract used to check it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class NodeProbe(Protocol):
    """Reachability check against a node."""

    async def ping(self, node: "NodeRecord") -> bool:
        """Return True when *node* answered; raising or returning False means unreachable."""
        ...


@dataclass(frozen=True)
class NodeRecord:
    """
    A monitored data-store node.

    Equality and hashing use ``host`` and ``port`` only, so the record can key
    a manager's state table regardless of which probe it carries.
    """

    host: str
    port: int
    probe: NodeProbe = field(compare=False, repr=False)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    async def ping(self) -> bool:
        return await self.probe.ping(self)

    def __str__(self) -> str:
        return self.address


__all__ = ["NodeProbe", "NodeRecord"]
