"""
Console output for dnsping.

Formats the run header, one line per attempt and the closing
statistics summary in the style of ping(8).
"""

import click

from .models import AttemptOutcome, AttemptStatus, RunConfig, RunStats


INVALID_HOSTNAME = " (invalid hostname)"


class ConsoleOutput:
    """Plain text output formatter."""

    @staticmethod
    def format_header(config: RunConfig) -> str:
        """Format the line printed before the first attempt."""
        return (
            f"PING DNS: {config.server_address}:{config.port}, "
            f"hostname: {config.host_name}, "
            f"rdatatype: {config.record_type_text}"
        )

    @staticmethod
    def format_attempt(outcome: AttemptOutcome, server_address: str) -> str:
        """
        Format the line for one finished attempt.

        A response without answer records is still timed but gets an
        "(invalid hostname)" annotation.
        """
        if outcome.status == AttemptStatus.TIMEOUT:
            return f"Request timeout for seq {outcome.sequence}"

        invalid = "" if outcome.has_answer else INVALID_HOSTNAME
        return (
            f"{outcome.response_size} bytes from {server_address}: "
            f"seq={outcome.sequence:<3d} "
            f"time={outcome.round_trip_ms:.3f} ms{invalid}"
        )

    @staticmethod
    def format_summary(server_address: str, stats: RunStats) -> str:
        """Format the statistics block printed after the loop ends."""
        lines = [
            "",
            f"--- {server_address} dnsping statistics ---",
            f"{stats.requests_sent} requests transmitted, "
            f"{stats.responses_received} responses received, "
            f"{stats.lost_percent:.1f}% lost",
            f"round-trip min/avg/max/stddev = "
            f"{stats.min_ms:.3f}/{stats.avg_ms:.3f}/{stats.max_ms:.3f}/{stats.stddev_ms:.3f} ms",
        ]
        return "\n".join(lines)

    @staticmethod
    def print_header(config: RunConfig) -> None:
        click.echo(ConsoleOutput.format_header(config))

    @staticmethod
    def attempt_printer(server_address: str):
        """Create an attempt callback that echoes each outcome."""
        def callback(outcome: AttemptOutcome) -> None:
            if outcome.status == AttemptStatus.CANCELLED:
                return
            click.echo(ConsoleOutput.format_attempt(outcome, server_address))

        return callback

    @staticmethod
    def print_summary(server_address: str, stats: RunStats) -> None:
        click.echo(ConsoleOutput.format_summary(server_address, stats))
