"""Event log entries."""

from __future__ import annotations

from dataclasses import dataclass, field

from evmkit.primitives.bits import B160, B256


@dataclass(frozen=True)
class Log:
    """A log emitted by a contract: address, indexed topics and data."""

    address: B160 = field(default_factory=B160.zero)
    topics: tuple[B256, ...] = ()
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", B160(self.address))
        object.__setattr__(self, "topics", tuple(B256(topic) for topic in self.topics))
        object.__setattr__(self, "data", bytes(self.data))