"""
Domain models for the SkyWalker client.

This module contains pure value records representing server entities.
They have no dependencies on HTTP or session logic and are never mutated
after construction.
"""
from __future__ import annotations

import dataclasses
import uuid


@dataclasses.dataclass(frozen=True)
class Token:
    """Bearer credential paired with the endpoint it was issued by."""

    endpoint: str
    value: str

    def __str__(self) -> str:
        # Never log the credential itself
        return f"token for {self.endpoint} ({len(self.value)} chars)"


@dataclasses.dataclass(frozen=True)
class Receiver:
    """Representation of a single installed receiver (rdhub) of a site."""

    id: int
    x: float
    y: float
    z: int  # elevation level


@dataclasses.dataclass(frozen=True)
class Tag:
    """Representation of a locatable person or asset at a site."""

    id: int
    name: str


@dataclasses.dataclass(frozen=True)
class BeaconIdentity:
    """iBeacon frame this device has to broadcast to be located."""

    namespace: uuid.UUID
    major: int
    minor: int


@dataclasses.dataclass(frozen=True)
class ResolvedPosition:
    """Position of a tag, taken from the receiver it was last seen nearest to."""

    receiver_id: int
    x: float
    y: float
    z: int

    @classmethod
    def at(cls, receiver: Receiver) -> ResolvedPosition:
        return cls(receiver.id, receiver.x, receiver.y, receiver.z)
