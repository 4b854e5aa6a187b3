"""
TrackerData: immutable snapshot of everything the tracker publishes.

This is a pure data module with no network dependencies.
"""
from __future__ import annotations

import dataclasses

from .errors import ErrorType
from .models import ResolvedPosition, Tag


@dataclasses.dataclass(frozen=True)
class TrackerData:
    """
    Copy-on-write snapshot handed to tracker listeners.

    Always replace via dataclasses.replace(), never mutate in place.
    """

    # Tags the user can follow at the active site
    tags: tuple[Tag, ...] = ()

    # tag_id → last resolved position
    positions: dict[int, ResolvedPosition] = dataclasses.field(default_factory=dict)

    # Error of the most recent failed request, cleared by the next success
    last_error: ErrorType | None = None
