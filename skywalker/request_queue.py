"""
TagRequestQueue: serialises position requests per tag.

This is a pure asyncio concurrency primitive with no network dependencies.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from .const import REQUEST_DELAY

_LOGGER = logging.getLogger(__name__)


class TagRequestQueue:
    """
    Serialises server calls for each tag.

    Requests for different tags run in parallel; requests for the same tag
    are executed one at a time with a minimum delay between them.  A job type
    that is already waiting or running for a tag is not queued again, so a
    slow server cannot make polls pile up.
    """

    def __init__(self, delay: float = REQUEST_DELAY) -> None:
        self._delay = delay
        # tag_id → asyncio.Queue of (job_type, coro_factory, Future) triples
        self._queues: dict[int, asyncio.Queue] = {}
        # tag_id → worker Task
        self._workers: dict[int, asyncio.Task] = {}
        # tag_id → job_type currently being executed
        self._running: dict[int, str | None] = {}
        # tag_id → job_types waiting in the queue
        self._queued_types: dict[int, set[str]] = {}

    async def enqueue(
        self,
        tag_id: int,
        job_type: str,
        coro_factory: Callable[[], Any],
    ) -> asyncio.Future:
        """
        Schedule coro_factory() on the queue of tag_id.

        Returns a Future with the job's result.  A duplicate job gets a Future
        already resolved to None.
        """
        self._ensure_tag(tag_id)
        loop = asyncio.get_running_loop()

        if job_type in self._queued_types[tag_id] or self._running.get(tag_id) == job_type:
            _LOGGER.debug("Skipping duplicate %s job for tag %s", job_type, tag_id)
            fut: asyncio.Future = loop.create_future()
            fut.set_result(None)
            return fut

        fut = loop.create_future()
        self._queued_types[tag_id].add(job_type)
        await self._queues[tag_id].put((job_type, coro_factory, fut))
        return fut

    def discard(self, tag_id: int) -> None:
        """Stop the worker of a tag that is no longer followed."""
        worker = self._workers.pop(tag_id, None)
        if worker is not None:
            worker.cancel()
        queue = self._queues.pop(tag_id, None)
        if queue is not None:
            _cancel_pending(queue)
        self._running.pop(tag_id, None)
        self._queued_types.pop(tag_id, None)

    async def shutdown(self) -> None:
        """Cancel all worker tasks and drain queues."""
        for task in self._workers.values():
            task.cancel()
        results = await asyncio.gather(*self._workers.values(), return_exceptions=True)
        for result in results:
            if isinstance(result, Exception) and not isinstance(result, asyncio.CancelledError):
                _LOGGER.debug("TagRequestQueue worker error during shutdown: %s", result)
        for queue in self._queues.values():
            _cancel_pending(queue)
        self._workers.clear()
        self._queues.clear()
        self._running.clear()
        self._queued_types.clear()

    def _ensure_tag(self, tag_id: int) -> None:
        if tag_id not in self._queues:
            self._queues[tag_id] = asyncio.Queue()
            self._running[tag_id] = None
            self._queued_types[tag_id] = set()
            self._workers[tag_id] = asyncio.ensure_future(self._worker(tag_id))

    async def _worker(self, tag_id: int) -> None:
        """Consume jobs from this tag's queue until cancelled."""
        queue = self._queues[tag_id]
        while True:
            job_type, coro_factory, fut = await queue.get()
            self._running[tag_id] = job_type
            self._queued_types.get(tag_id, set()).discard(job_type)
            try:
                result = await coro_factory()
                if not fut.done():
                    fut.set_result(result)
            except asyncio.CancelledError:
                fut.cancel()
                raise
            except Exception as exc:  # noqa: BLE001
                if not fut.done():
                    fut.set_exception(exc)
            finally:
                if self._queues.get(tag_id) is queue:
                    self._running[tag_id] = None
                queue.task_done()
                await asyncio.sleep(self._delay)


def _cancel_pending(queue: asyncio.Queue) -> None:
    """Cancel the futures of jobs that will never run."""
    while not queue.empty():
        _job_type, _coro_factory, fut = queue.get_nowait()
        fut.cancel()
