"""Quiet-period debouncing on the asyncio event loop."""
import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Run ``callback`` once input has been quiet for ``delay`` seconds.

    Every ``trigger`` restarts the timer, so only the latest arguments are
    delivered.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]):
        self.delay = delay
        self._callback = callback
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._task = asyncio.create_task(self._run(*args))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, *args: Any) -> None:
        await asyncio.sleep(self.delay)
        # cancel() no longer reaches a callback that has started
        self._task = None
        await self._callback(*args)
