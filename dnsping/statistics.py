"""
Statistical reduction of dnsping round-trip samples.

Calculates min, average, max and population standard deviation in
milliseconds, plus the share of requests that got no response.
"""

from collections.abc import Sequence

import numpy as np

from .models import NANOS_PER_MILLI, RunStats


def lost_percent(requests_sent: int, responses_received: int) -> float:
    """Percentage of requests without a timed response."""
    if requests_sent == 0:
        return 0.0
    return 100 * (requests_sent - responses_received) / requests_sent


def calculate_run_stats(samples_ns: Sequence[int], requests_sent: int) -> RunStats:
    """
    Calculate summary statistics for a run.

    Pure function of its inputs; the sample sequence is not modified.

    Args:
        samples_ns: Round-trip durations of successful attempts, in nanoseconds
        requests_sent: Number of attempts made

    Returns:
        RunStats with latency figures in milliseconds
    """
    received = len(samples_ns)

    if received:
        latencies = np.asarray(samples_ns, dtype=np.float64) / NANOS_PER_MILLI

        min_ms = float(np.min(latencies))
        max_ms = float(np.max(latencies))
        # Summation rounding can push the mean a few ulps outside the range
        avg_ms = min(max(float(np.mean(latencies)), min_ms), max_ms)
        if min_ms == max_ms:
            stddev_ms = 0.0
        else:
            stddev_ms = float(np.std(latencies))  # ddof=0: population
    else:
        min_ms = max_ms = avg_ms = stddev_ms = 0.0

    return RunStats(
        requests_sent=requests_sent,
        responses_received=received,
        lost_percent=lost_percent(requests_sent, received),
        min_ms=min_ms,
        avg_ms=avg_ms,
        max_ms=max_ms,
        stddev_ms=stddev_ms,
    )
