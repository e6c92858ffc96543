"""
Probe loop for dnsping.

Sends up to `count` sequential queries, one in flight at a time,
pacing them by the configured interval and stopping early when an
interrupt is received.
"""

import logging
from typing import Callable, Optional, Protocol

from .cancellation import StopContext
from .errors import AttemptCancelled, AttemptTimeout
from .models import (
    AttemptOutcome,
    AttemptStatus,
    ProbeRun,
    QueryResult,
    RunConfig,
)


logger = logging.getLogger(__name__)

# Called once per finished attempt
AttemptCallback = Callable[[AttemptOutcome], None]


class QueryEngine(Protocol):
    async def query(self, config: RunConfig) -> QueryResult: ...


class ProbeRunner:
    """
    Drives the timed query attempts for one run.

    A TransportError from the engine is not caught here: it is fatal and
    propagates to the caller, which exits without printing a summary.
    """

    def __init__(
        self,
        config: RunConfig,
        engine: QueryEngine,
        stop: Optional[StopContext] = None,
    ):
        """
        Initialize the probe runner.

        Args:
            config: Validated run configuration
            engine: Query engine performing single exchanges
            stop: Stop context shared with the interrupt listener
        """
        self.config = config
        self.engine = engine
        self.stop = stop or StopContext()

    def _pacing_delay(self, elapsed_ns: int) -> float:
        """Seconds left of the interval after an attempt that took elapsed_ns."""
        return self.config.interval - elapsed_ns / 1e9

    async def run(self, on_attempt: Optional[AttemptCallback] = None) -> ProbeRun:
        """
        Run the probe loop.

        Args:
            on_attempt: Optional callback for each finished attempt

        Returns:
            ProbeRun with the number of requests sent and the
            round-trip durations of every response received
        """
        run = ProbeRun()

        for seq in range(self.config.count):
            if self.stop.is_stopping():
                logger.debug("Stop requested, ending before seq %d", seq)
                break

            run.requests_sent += 1
            try:
                result = await self.stop.run_cancellable(self.engine.query(self.config))
            except AttemptTimeout:
                run.timeouts += 1
                if on_attempt:
                    on_attempt(AttemptOutcome(seq, AttemptStatus.TIMEOUT))
                continue
            except AttemptCancelled:
                logger.debug("Query for seq %d aborted by interrupt", seq)
                run.cancelled = True
                if on_attempt:
                    on_attempt(AttemptOutcome(seq, AttemptStatus.CANCELLED))
                break

            run.samples.append(result.timing.total_ns)
            if on_attempt:
                on_attempt(AttemptOutcome(seq, AttemptStatus.SUCCESS, result))

            await self.stop.sleep(self._pacing_delay(result.timing.total_ns))

        logger.debug(
            "Run finished: sent=%d received=%d timeouts=%d cancelled=%s",
            run.requests_sent,
            run.responses_received,
            run.timeouts,
            run.cancelled,
        )
        return run
