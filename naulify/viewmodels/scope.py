"""Task ownership and response sequencing for view-model commands.

``TaskScope`` plays the role of a screen-bound coroutine scope: every command
runs as one ``asyncio`` task owned by the scope, and ``close()`` cancels the
tasks still in flight when the screen goes away.

``RequestSequencer`` guards projections that are reloaded repeatedly for the
same key. Each load takes a ticket; only the newest ticket for a key may
publish its result, so a slow earlier response can never overwrite a newer
one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Dict, Hashable, Set, TypeVar

T = TypeVar("T")

log = logging.getLogger(__name__)


class TaskScope:
    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._tasks: Set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def launch(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        """Schedule ``coro`` on the running loop and track it until done."""
        if self._closed:
            coro.close()
            raise RuntimeError(f"{self.name}: cannot launch after close()")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def active_count(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def close(self) -> None:
        """Cancel all in-flight tasks. Further launches raise ``RuntimeError``."""
        if self._closed:
            return
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            log.debug("%s closed, cancelled %d task(s)", self.name, len(pending))


class RequestSequencer:
    def __init__(self) -> None:
        self._latest: Dict[Hashable, int] = {}
        self._counter = 0

    def begin(self, key: Hashable) -> int:
        """Issue a ticket for a new request on ``key``, superseding older ones."""
        self._counter += 1
        self._latest[key] = self._counter
        return self._counter

    def is_current(self, key: Hashable, ticket: int) -> bool:
        return self._latest.get(key) == ticket


__all__ = ["RequestSequencer", "TaskScope"]
