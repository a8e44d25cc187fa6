"""Debounced query scheduling.

Every submission cancels the pending timer and arms a new one, so only the
latest text is ever searched. A generation counter backs this up: a timer
task that already woke up but belongs to an older submission exits without
running.

    IDLE --submit--> PENDING --submit--> PENDING (timer restarted)
    PENDING --timer fires--> SEARCHING --complete--> IDLE
    any --close--> CLOSED
"""

import asyncio
from collections.abc import Callable
from enum import StrEnum

from loguru import logger

from workspace_search.config import DEBOUNCE_SECONDS


class SchedulerState(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SEARCHING = "searching"
    CLOSED = "closed"


class QueryScheduler:
    """Runs `run(text)` once input has been quiet for `delay` seconds.

    Must be used from inside a running asyncio event loop.
    """

    def __init__(self, run: Callable[[str], object], *, delay: float = DEBOUNCE_SECONDS) -> None:
        self._run = run
        self.delay = delay
        self.state = SchedulerState.IDLE
        self.runs = 0
        self._generation = 0
        self._task: asyncio.Task[None] | None = None

    def submit(self, text: str) -> bool:
        """Arm (or re-arm) the debounce timer. Returns False once closed."""
        if self.state is SchedulerState.CLOSED:
            logger.debug("Scheduler closed, ignoring {!r}", text)
            return False

        # Raises RuntimeError without a running loop; nothing is touched yet.
        loop = asyncio.get_running_loop()
        self.cancel()
        self._generation += 1
        self.state = SchedulerState.PENDING
        self._task = loop.create_task(self._fire(text, self._generation))
        return True

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        self._task = None
        # Invalidate a timer that is mid-run or already woken.
        self._generation += 1
        if self.state is SchedulerState.PENDING:
            self.state = SchedulerState.IDLE

    def close(self) -> None:
        """Cancel pending work; no further runs happen after this."""
        self.cancel()
        self.state = SchedulerState.CLOSED

    async def wait_idle(self) -> None:
        """Wait until no timer is pending, following restarts."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

    async def _fire(self, text: str, generation: int) -> None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            logger.debug("Search for {!r} superseded", text)
            raise

        if generation != self._generation or self.state is SchedulerState.CLOSED:
            return

        self.state = SchedulerState.SEARCHING
        self.runs += 1
        try:
            self._run(text)
        except Exception:
            logger.exception("Search for {!r} failed", text)
        finally:
            # A submit() from inside run() has already moved us to PENDING.
            if self.state is SchedulerState.SEARCHING:
                self.state = SchedulerState.IDLE
