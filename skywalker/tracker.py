"""
PositionTracker: the polling loop that keeps followed tags located.

Responsibilities:
- Drive three update tiers at different frequencies:
    Tier 1: receiver topology  every TOPOLOGY_INTERVAL seconds (or when stale)
    Tier 2: tag catalogue      every TAGS_INTERVAL seconds
    Tier 3: positions          every positions interval
- Delegate per-tag call serialisation to TagRequestQueue (request_queue.py).
- Push TrackerData snapshots to listeners as soon as each response arrives.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from typing import Callable

from .client import SkyWalkerClient
from .const import POSITIONS_INTERVAL, TAGS_INTERVAL, TOPOLOGY_INTERVAL
from .errors import NoSiteSelectedError
from .request_queue import TagRequestQueue
from .result import Result
from .tracker_data import TrackerData

_LOGGER = logging.getLogger(__name__)

Listener = Callable[[TrackerData], None]


class PositionTracker:
    """
    Periodically refreshes the active site and the positions of followed tags.

    The client must be logged in with a site selected before the first refresh.
    """

    def __init__(
        self,
        client: SkyWalkerClient,
        tag_ids: list[int] | None = None,
        positions_interval: float | None = None,
    ) -> None:
        self.client = client
        self.followed: set[int] = set(tag_ids or ())
        if positions_interval is None:
            positions_interval = (
                client.config.positions_interval if client.config is not None else POSITIONS_INTERVAL
            )
        self.positions_interval = positions_interval
        self.data = TrackerData()

        self._queue = TagRequestQueue()
        self._listeners: list[Listener] = []

        # Tier timestamps initialized to 0 so every tier fires on first call
        self._last_topology_fetch: float = 0.0
        self._last_tags_fetch: float = 0.0
        self._last_positions_fetch: float = 0.0

        # Set when a tag was reported near a receiver the topology does not list
        self._topology_stale: bool = False
        self._initial_refresh_done: bool = False
        self._loop_task: asyncio.Task | None = None
        self._tier_tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Followed tags and listeners
    # ------------------------------------------------------------------

    def follow(self, tag_id: int) -> None:
        self.followed.add(tag_id)

    def unfollow(self, tag_id: int) -> None:
        self.followed.discard(tag_id)
        self._queue.discard(tag_id)
        if tag_id in self.data.positions:
            positions = {k: v for k, v in self.data.positions.items() if k != tag_id}
            self.set_data(dataclasses.replace(self.data, positions=positions))

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for new snapshots; returns a function that removes it."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def set_data(self, data: TrackerData) -> None:
        """Publish a new snapshot to all listeners."""
        self.data = data
        for listener in list(self._listeners):
            try:
                listener(data)
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Tracker listener %s failed", listener)

    # ------------------------------------------------------------------
    # Refresh entry point
    # ------------------------------------------------------------------

    async def refresh(self) -> TrackerData:
        """
        Run the tiers that are due.

        First call: runs all three tiers in order so positions can be resolved
        against a loaded topology, and returns the populated snapshot.

        Later calls: start overdue tiers as background tasks and return the
        current snapshot immediately; listeners get the results as they arrive.

        Without an active site (logged out) nothing runs; the next refresh
        after a site is selected starts over with a full initial refresh.
        """
        if self.client.site is None:
            _LOGGER.debug("No site selected, skipping refresh")
            self._initial_refresh_done = False
            self._topology_stale = False
            return self.data

        if not self._initial_refresh_done:
            await self._run_topology_tier()
            await self._run_tags_tier()
            await self._run_positions_tier()
            self._initial_refresh_done = True
            return self.data

        now = time.monotonic()

        if self._topology_stale or now - self._last_topology_fetch >= TOPOLOGY_INTERVAL:
            self._spawn(self._run_topology_tier())

        if now - self._last_tags_fetch >= TAGS_INTERVAL:
            self._spawn(self._run_tags_tier())

        if now - self._last_positions_fetch >= self.positions_interval:
            self._spawn(self._run_positions_tier())

        return self.data

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tier_tasks.add(task)
        task.add_done_callback(self._on_tier_done)
        return task

    def _on_tier_done(self, task: asyncio.Task) -> None:
        self._tier_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _LOGGER.error("Tracker tier failed: %s", exc, exc_info=exc)

    # ------------------------------------------------------------------
    # Tier 1: receiver topology
    # ------------------------------------------------------------------

    async def _run_topology_tier(self) -> None:
        self._last_topology_fetch = time.monotonic()
        self._topology_stale = False
        try:
            result = await self.client.load_receivers()
        except NoSiteSelectedError:
            _LOGGER.debug("Site cleared before the topology tier ran")
            return
        self._record(result)

    # ------------------------------------------------------------------
    # Tier 2: tag catalogue
    # ------------------------------------------------------------------

    async def _run_tags_tier(self) -> None:
        self._last_tags_fetch = time.monotonic()
        site = self.client.site
        try:
            result = await self.client.load_tags()
        except NoSiteSelectedError:
            _LOGGER.debug("Site cleared before the tags tier ran")
            return
        if self.client.site is not site:
            # Site changed while loading; its tags are no longer of interest
            return
        if result.is_success:
            self.set_data(dataclasses.replace(self.data, tags=site.available_tags, last_error=None))
        else:
            self._record(result)

    # ------------------------------------------------------------------
    # Tier 3: positions
    # ------------------------------------------------------------------

    async def _run_positions_tier(self) -> None:
        """Enqueue a locate job per followed tag and publish each position as it arrives."""
        self._last_positions_fetch = time.monotonic()
        tag_ids = sorted(self.followed)
        if not tag_ids:
            return

        futures = {
            tag_id: await self._queue.enqueue(
                tag_id,
                "position",
                lambda tid=tag_id: self.client.locate(tid),
            )
            for tag_id in tag_ids
        }

        async def _collect(tag_id: int, fut: asyncio.Future) -> None:
            try:
                result: Result | None = await fut
            except asyncio.CancelledError:
                return
            except Exception as exc:  # noqa: BLE001
                _LOGGER.warning("Failed to locate tag %s: %s", tag_id, exc)
                return
            if result is None:
                # Duplicate poll skipped by the queue
                return
            if result.is_success:
                if tag_id not in self.followed:
                    return
                positions = dict(self.data.positions)
                positions[tag_id] = result.value
                self.set_data(dataclasses.replace(self.data, positions=positions, last_error=None))
            elif result.is_not_found:
                self._topology_stale = True
            elif result.is_error:
                self._record(result)

        await asyncio.gather(
            *[_collect(tid, fut) for tid, fut in futures.items()],
            return_exceptions=True,
        )

    def _record(self, result: Result) -> None:
        """Publish the error of a failed tier; successes of other tiers clear it."""
        if result.is_error and self.data.last_error is not result.error:
            self.set_data(dataclasses.replace(self.data, last_error=result.error))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> asyncio.Task:
        """Start polling in the background; returns the loop task."""
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.ensure_future(self._run())
        return self._loop_task

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Tracker refresh failed")
            await asyncio.sleep(self.positions_interval)

    async def shutdown(self) -> None:
        """Stop polling and clean up all resources owned by this tracker."""
        if self._loop_task is not None:
            self._loop_task.cancel()
            await asyncio.gather(self._loop_task, return_exceptions=True)
            self._loop_task = None
        await self._queue.shutdown()
        for task in list(self._tier_tasks):
            task.cancel()
        if self._tier_tasks:
            await asyncio.gather(*self._tier_tasks, return_exceptions=True)
        self._tier_tasks.clear()
