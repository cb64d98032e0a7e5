"""Sequential task queue used to keep sends in order per conversation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SendQueue:
    """
    FIFO queue that runs one submitted task at a time.

    A task starts only after the previous one has finished or failed.
    asyncio.Lock wakes waiters in acquisition order, which gives FIFO.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = asyncio.Lock()
        self._pending = 0

    @property
    def pending(self) -> int:
        """Tasks submitted and not yet finished, including the running one."""
        return self._pending

    async def run(self, task: Callable[[], Awaitable[T]]) -> T:
        self._pending += 1
        try:
            async with self._lock:
                logger.debug(
                    "Send queue running task",
                    extra={"queue": self.name, "pending": self._pending},
                )
                return await task()
        finally:
            self._pending -= 1
