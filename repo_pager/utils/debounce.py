"""Cancellable debounce timer with an injectable clock.

``DebouncedCallback`` coalesces bursts of ``schedule()`` calls into a single
invocation of an async callback, ``delay`` seconds after the last call. It can
be cancelled (idempotently) or fired immediately, and it never touches the
wall clock directly: production code uses ``LoopClock`` (asyncio's
``call_later``), tests use ``ManualClock`` and advance time by hand.

Example:
    clock = ManualClock()
    settle = DebouncedCallback(resync, delay=3.0, clock=clock)
    settle.schedule()
    settle.schedule()          # restarts the window
    clock.advance(3.0)         # fires once
    await settle.wait()        # the async callback has finished
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Handle of a scheduled callback."""

    def cancel(self) -> None: ...


class Clock(Protocol):
    """Source of time and delayed callbacks."""

    def now(self) -> float:
        """Current time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay`` seconds."""
        ...


class LoopClock:
    """Clock backed by the running asyncio event loop."""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class _ManualHandle:
    __slots__ = ("cancelled", "deadline", "callback")

    def __init__(self, deadline: float, callback: Callable[[], None]) -> None:
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock:
    """Deterministic clock for tests; time only moves through ``advance``."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet cancelled callbacks."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, running every callback that falls due.

        Returns:
            Number of callbacks that ran.
        """
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, deadline)
            if handle.cancelled:
                continue
            handle.cancelled = True
            handle.callback()
            ran += 1
        self._now = target
        return ran


class DebouncedCallback:
    """Run an async callback once, ``delay`` seconds after the last schedule.

    States: idle, pending (timer armed) and running (callback in flight).
    ``cancel()`` is a no-op when nothing is pending. A callback that is
    already running is not interrupted by ``cancel()``.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[None]],
        delay: float,
        clock: Clock | None = None,
        *,
        name: str = "debounce",
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._callback = callback
        self.delay = delay
        self._clock = clock or LoopClock()
        self.name = name
        self._handle: TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self.fire_count = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self) -> None:
        """Arm the timer, restarting it if it was already armed."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._clock.call_later(self.delay, self._on_timer)

    def cancel(self) -> bool:
        """Disarm the timer.

        Returns:
            True if a pending invocation was cancelled.
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    async def fire_now(self) -> bool:
        """Cancel the timer and run the callback immediately if it was armed.

        Returns:
            True if the callback ran.
        """
        if not self.cancel():
            return False
        self.fire_count += 1
        await self._callback()
        return True

    async def wait(self) -> None:
        """Wait for a timer-triggered callback that is in flight."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.shield(task)

    async def aclose(self) -> None:
        """Disarm the timer and cancel an in-flight callback."""
        self.cancel()
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    def _on_timer(self) -> None:
        self._handle = None
        self.fire_count += 1
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    async def _run(self) -> None:
        try:
            await self._callback()
        except asyncio.CancelledError:
            raise
        except Exception:
            # Nobody awaits a timer-triggered run; the failure is reported here.
            logger.exception("Debounced callback %s failed", self.name)


__all__ = ["Clock", "DebouncedCallback", "LoopClock", "ManualClock", "TimerHandle"]
