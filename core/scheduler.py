"""
Timer scheduling for simulated asynchronous actions.

All waiting in the auth workflow is expressed as scheduled callbacks rather
than blocking calls. Two implementations share one interface:

- VirtualScheduler: deterministic virtual clock, advanced explicitly. Used by
  tests and anywhere time must be controlled.
- AsyncioScheduler: real wall-clock timers on the running asyncio loop. Used
  by the HTTP service.

Every scheduled callback returns a TimerHandle that can be cancelled any
number of times; a cancelled or already-fired one-shot timer never fires.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Protocol

from utils.timezone import now_ms

logger = logging.getLogger(__name__)


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, delay_ms: int, periodic: bool = False):
        self.delay_ms = delay_ms
        self.periodic = periodic
        self._active = True
        self._on_cancel: Callable[[], None] | None = None

    @property
    def active(self) -> bool:
        """True while the callback may still fire."""
        return self._active

    def cancel(self) -> None:
        """Cancel the timer. Safe to call repeatedly or after it fired."""
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()

    def _finish(self) -> None:
        self._active = False


class Scheduler(Protocol):
    """Clock plus delayed/periodic callback scheduling."""

    def now_ms(self) -> int:
        ...

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        ...

    def schedule_periodic(self, period_ms: int, callback: Callable[[], None]) -> TimerHandle:
        ...


def _check_delay(delay_ms: int) -> None:
    if delay_ms < 0:
        raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")


def _check_period(period_ms: int) -> None:
    if period_ms <= 0:
        raise ValueError(f"period_ms must be > 0, got {period_ms}")


class VirtualScheduler:
    """
    Scheduler driven by a virtual millisecond clock.

    Usage:
        scheduler = VirtualScheduler(start_ms=1_700_000_000_000)
        scheduler.schedule_once(2000, on_done)
        scheduler.advance(2000)  # on_done fires here
    """

    def __init__(self, start_ms: int = 0):
        self._now = start_ms
        self._seq = itertools.count()
        self._queue: list[tuple[int, int, TimerHandle, Callable[[], None]]] = []

    def now_ms(self) -> int:
        return self._now

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        _check_delay(delay_ms)
        handle = TimerHandle(delay_ms)
        self._push(self._now + delay_ms, handle, callback)
        return handle

    def schedule_periodic(self, period_ms: int, callback: Callable[[], None]) -> TimerHandle:
        _check_period(period_ms)
        handle = TimerHandle(period_ms, periodic=True)
        self._push(self._now + period_ms, handle, callback)
        return handle

    def _push(self, due_ms: int, handle: TimerHandle, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (due_ms, next(self._seq), handle, callback))

    def advance(self, ms: int) -> None:
        """
        Move the clock forward, firing every timer that comes due.

        Timers fire in due-time order (ties in scheduling order). Timers
        scheduled by a callback during the advance fire too if they fall
        inside the window.
        """
        if ms < 0:
            raise ValueError(f"Cannot move the clock backwards ({ms} ms)")

        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, handle, callback = heapq.heappop(self._queue)
            if not handle.active:
                continue

            self._now = due_ms
            if handle.periodic:
                self._push(due_ms + handle.delay_ms, handle, callback)
            else:
                handle._finish()
            callback()

        self._now = target

    def pending(self) -> int:
        """Number of timers that may still fire."""
        return sum(1 for _, _, handle, _ in self._queue if handle.active)


class AsyncioScheduler:
    """
    Scheduler over an asyncio event loop, using the wall clock.

    Bind to a loop at startup (bind), or schedule from inside a running loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        """Attach to the loop the service runs on."""
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def now_ms(self) -> int:
        return now_ms()

    def schedule_once(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        _check_delay(delay_ms)
        handle = TimerHandle(delay_ms)

        def _fire() -> None:
            if not handle.active:
                return
            handle._finish()
            callback()

        timer = self._get_loop().call_later(delay_ms / 1000, _fire)
        handle._on_cancel = timer.cancel
        return handle

    def schedule_periodic(self, period_ms: int, callback: Callable[[], None]) -> TimerHandle:
        _check_period(period_ms)
        handle = TimerHandle(period_ms, periodic=True)
        loop = self._get_loop()
        current: list[asyncio.TimerHandle] = []

        def _fire() -> None:
            if not handle.active:
                return
            current[0] = loop.call_later(period_ms / 1000, _fire)
            callback()

        current.append(loop.call_later(period_ms / 1000, _fire))
        handle._on_cancel = lambda: current[0].cancel()
        logger.debug(f"Periodic timer scheduled every {period_ms} ms")
        return handle
