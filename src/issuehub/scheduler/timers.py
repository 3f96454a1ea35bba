"""Delayed and periodic calls on the event loop."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class DelayedCall:
    """Runs ``callback`` once, ``delay`` seconds after ``schedule()``.

    Requests made while a timer is armed collapse into that timer, so a burst
    of mutations produces a single follow-up call. Once the timer fires the
    next request arms a fresh one, even if the callback is still running.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], Awaitable[Any]],
        name: str = "delayed-call",
    ) -> None:
        """Initialize the delayed call.

        Args:
            delay: Seconds to wait before invoking the callback.
            callback: Coroutine function to invoke.
            name: Task name, used in logs.
        """
        self.delay = delay
        self.callback = callback
        self.name = name
        self._armed = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def armed(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._armed

    def schedule(self) -> bool:
        """Arm the timer unless one is already waiting.

        Returns:
            True if a new timer was started, False if collapsed into a pending one.
        """
        if self._armed:
            logger.debug("%s already pending, request collapsed", self.name)
            return False
        self._armed = True
        task = asyncio.create_task(self._fire(), name=self.name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("%s scheduled in %.1fs", self.name, self.delay)
        return True

    async def _fire(self) -> None:
        try:
            await asyncio.sleep(self.delay)
        finally:
            self._armed = False
        try:
            await self.callback()
        except Exception:
            logger.exception("%s failed", self.name)

    async def cancel(self) -> None:
        """Cancel the pending timer and any callback still running."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._armed = False


class PeriodicTask:
    """Invokes ``callback`` every ``interval`` seconds until stopped.

    A failing callback is logged and the loop carries on; the next tick is the
    retry.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[Any]],
        run_immediately: bool = True,
        name: str = "periodic-task",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self.run_immediately = run_immediately
        self.name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the loop on the running event loop. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info("%s started (every %.1fs)", self.name, self.interval)

    async def _loop(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval)
        while True:
            try:
                await self.callback()
            except Exception:
                logger.exception("%s tick failed", self.name)
            await asyncio.sleep(self.interval)

    async def stop(self) -> None:
        """Stop the loop and wait for it to unwind."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("%s stopped", self.name)
