"""Interrupt handling: first Ctrl-C stops gracefully, second exits at once."""

import asyncio
import logging
import signal
import sys
from collections.abc import Callable

from .cancellation import RunState, StopContext

__all__ = ["install_interrupt_handler", "force_exit"]

logger = logging.getLogger(__name__)


def force_exit() -> None:
    """Leave immediately with status 0, skipping the summary."""
    sys.exit(0)


def install_interrupt_handler(
    stop: StopContext,
    on_force_exit: Callable[[], None] = force_exit,
    signals: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM),
) -> None:
    """Route interrupt signals to the stop context.

    Must be called from a coroutine running on the main thread. Uses
    ``loop.add_signal_handler`` where the platform supports it and falls
    back to ``signal.signal`` otherwise.

    Args:
        stop: Stop context shared with the probe loop.
        on_force_exit: Called when a second signal arrives.
        signals: Signals to listen for.
    """
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        state = stop.request_stop()
        if state == RunState.FORCE_EXIT:
            logger.debug("Second interrupt received, exiting immediately")
            on_force_exit()
        else:
            logger.debug("Interrupt received, stopping after the current attempt")

    for sig in signals:
        try:
            loop.add_signal_handler(sig, handle_signal)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(sig, lambda _signum, _frame: loop.call_soon_threadsafe(handle_signal))
