"""Cooperative cancellation shared by the interrupt listener and the probe loop."""

import asyncio
import contextlib
import threading
from enum import Enum
from typing import Awaitable, TypeVar

from .errors import AttemptCancelled

__all__ = ["RunState", "StopContext"]

T = TypeVar("T")


class RunState(Enum):
    """Lifecycle of a run. Transitions only move forward."""
    RUNNING = "running"
    STOP_REQUESTED = "stop_requested"
    FORCE_EXIT = "force_exit"


class StopContext:
    """
    Tri-state stop flag plus an event that wakes waiting coroutines.

    The interrupt listener is the only caller of request_stop(); the
    probe loop only reads the state and waits on it.
    """

    def __init__(self):
        self._state = RunState.RUNNING
        self._lock = threading.Lock()
        self._stopped = asyncio.Event()

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state

    def request_stop(self) -> RunState:
        """
        Advance the state: RUNNING -> STOP_REQUESTED -> FORCE_EXIT.

        Returns:
            The state after the transition.
        """
        with self._lock:
            if self._state == RunState.RUNNING:
                self._state = RunState.STOP_REQUESTED
            else:
                self._state = RunState.FORCE_EXIT
            state = self._state
        self._stopped.set()
        return state

    def is_stopping(self) -> bool:
        return self.state != RunState.RUNNING

    async def sleep(self, seconds: float) -> None:
        """Sleep for up to `seconds`, returning early if a stop is requested."""
        if seconds <= 0 or self.is_stopping():
            return
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._stopped.wait(), timeout=seconds)

    async def run_cancellable(self, aw: Awaitable[T]) -> T:
        """
        Await `aw`, aborting it as soon as a stop is requested.

        Raises:
            AttemptCancelled: if the stop arrived before `aw` finished
        """
        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._stopped.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task.cancelled():
            raise AttemptCancelled("query aborted by interrupt")
        return task.result()
