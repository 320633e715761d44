"""
Tick scheduling for LifeSim.

Purpose
-------
One tick is one simulated year, fired on a fixed wall-clock cadence. The
engine arms a scheduler with its next tick only after the current tick and
every host update it triggered have completed, so ticks never overlap and
never read stale inputs.

- AsyncioScheduler: real cadence on an asyncio event loop (call_later)
- ManualScheduler: holds the pending callback until `fire()` is called;
  deterministic driving for tests and batch runs

Both keep at most one pending callback. `cancel()` drops it; a tick that is
already running finishes and simply finds nothing to reschedule.

Example
-------
>>> sched = ManualScheduler()
>>> stepper = SimulationStepper(host, scheduler=sched)
>>> stepper.start()
>>> sched.run_until_idle()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from typing_extensions import Protocol, runtime_checkable

__all__ = [
    "Scheduler",
    "AsyncioScheduler",
    "ManualScheduler",
]

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@runtime_checkable
class Scheduler(Protocol):
    """Single-slot delayed callback."""

    @property
    def pending(self) -> bool: ...

    def schedule(self, delay: float, callback: Callback) -> None: ...

    def cancel(self) -> None: ...


class AsyncioScheduler:
    """
    Schedule ticks with ``loop.call_later``.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop, optional
        Loop to schedule on. Defaults to the running loop at the time of
        the first `schedule` call.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float, callback: Callback) -> None:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        # replace without signalling idle: a set() here would wake waiters
        if self._handle is not None:
            self._handle.cancel()
        self._idle.clear()
        self._handle = self._loop.call_later(delay, self._run, callback)
        logger.debug("tick scheduled in %.3fs", delay)

    def _run(self, callback: Callback) -> None:
        self._handle = None
        try:
            callback()
        finally:
            if self._handle is None:
                self._idle.set()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("pending tick cancelled")
        self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until no tick is pending (completed, paused or reset)."""
        await self._idle.wait()


class ManualScheduler:
    """
    Scheduler driven by the caller.

    The delay passed to `schedule` is recorded in `last_delay` but never
    waited on.
    """

    def __init__(self):
        self._callback: Optional[Callback] = None
        self.last_delay: Optional[float] = None
        self.fired = 0

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, delay: float, callback: Callback) -> None:
        self.last_delay = delay
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    def fire(self) -> bool:
        """Run the pending callback. Returns False when nothing was pending."""
        callback, self._callback = self._callback, None
        if callback is None:
            return False
        self.fired += 1
        callback()
        return True

    def run_until_idle(self, max_ticks: Optional[int] = None) -> int:
        """Fire until nothing is pending or *max_ticks* callbacks ran."""
        count = 0
        while self.pending and (max_ticks is None or count < max_ticks):
            self.fire()
            count += 1
        return count
