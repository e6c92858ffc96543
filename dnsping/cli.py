"""
Command-line interface for dnsping.

Measure response time to the given DNS server by asking it to
resolve a specified host, like ping(8) for DNS.
"""

import asyncio
import math
import re
import sys
from typing import Optional

import click

from . import __version__
from .cancellation import StopContext
from .config import LookupFn, build_run_config
from .errors import AttemptCancelled, InvalidRecordType, ResolutionError, TransportError
from .logging_config import configure_logs
from .models import Transport
from .output import ConsoleOutput
from .query_engine import DNSQueryEngine
from .runner import ProbeRunner
from .signals import install_interrupt_handler
from .statistics import calculate_run_stats


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

# Seconds per unit of a Go-style duration string such as "1m30s"
DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_DURATION = re.compile(rf"(?:{_DURATION_PART.pattern})+")


class Duration(click.ParamType):
    """Duration like "1s", "500ms" or "1m30s"; a bare number means seconds."""

    name = "duration"

    def convert(self, value, param, ctx) -> float:
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            text = value.strip()
            if _NUMBER.fullmatch(text):
                seconds = float(text)
            elif _DURATION.fullmatch(text):
                seconds = sum(
                    float(number) * DURATION_UNITS[unit]
                    for number, unit in _DURATION_PART.findall(text)
                )
            else:
                self.fail(f"{value!r} is not a valid duration", param, ctx)

        if not math.isfinite(seconds) or seconds < 0:
            self.fail(f"{value!r} must be a finite, non-negative duration", param, ctx)
        return seconds


DURATION = Duration()


async def ping(
    server: str,
    port: Optional[int],
    host: str,
    rdatatype: str,
    count: int,
    interval: float,
    timeout: float,
    transport: Transport = Transport.UDP,
    use_dnssec: bool = False,
    lookup: Optional[LookupFn] = None,
) -> None:
    """
    Run one dnsping session and print its results.

    Raises:
        ResolutionError: if the server hostname cannot be resolved
        InvalidRecordType: if the record type is unknown
        TransportError: on a non-timeout failure mid-run (no summary)
    """
    stop = StopContext()
    install_interrupt_handler(stop)

    try:
        config = await stop.run_cancellable(build_run_config(
            server=server,
            port=port,
            host=host,
            rdatatype=rdatatype,
            count=count,
            interval=interval,
            timeout=timeout,
            transport=transport,
            use_dnssec=use_dnssec,
            lookup=lookup,
        ))
    except AttemptCancelled as e:
        # Interrupted while looking up the server hostname
        raise ResolutionError(server, "interrupted") from e

    ConsoleOutput.print_header(config)

    engine = DNSQueryEngine(timeout=config.timeout, use_dnssec=config.use_dnssec)
    try:
        run = await ProbeRunner(config, engine, stop).run(
            on_attempt=ConsoleOutput.attempt_printer(config.server_address),
        )
    finally:
        await engine.close()

    stats = calculate_run_stats(run.samples, run.requests_sent)
    ConsoleOutput.print_summary(config.server_address, stats)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__)
@click.option(
    "-port", "port",
    type=click.IntRange(1, 65535),
    default=None,
    help="Port to connect to the DNS server (default 53; 853 for dot, 443 for doh)",
)
@click.option(
    "-host", "host",
    default="wikipedia.org",
    show_default=True,
    help="Host name to ask DNS server to resolve",
)
@click.option(
    "-rdatatype", "rdatatype",
    default="A",
    show_default=True,
    help="DNS record type of the query",
)
@click.option(
    "-c", "count",
    type=click.IntRange(min=0),
    default=10,
    show_default=True,
    help="Number of times to query",
)
@click.option(
    "-W", "interval",
    type=DURATION,
    default="1s",
    show_default=True,
    help="Wait time between pings",
)
@click.option(
    "-t", "timeout",
    type=DURATION,
    default="2s",
    show_default=True,
    help="Amount of time to wait for a server response",
)
@click.option(
    "-transport", "transport",
    type=click.Choice([t.value for t in Transport]),
    default=Transport.UDP.value,
    show_default=True,
    help="Transport protocol to query over",
)
@click.option(
    "-dnssec", "dnssec",
    is_flag=True,
    help="Set the DNSSEC OK bit on queries",
)
@click.option(
    "-v", "verbose",
    is_flag=True,
    help="Log diagnostics to stderr",
)
@click.argument("server")
def main(
    server: str,
    port: Optional[int],
    host: str,
    rdatatype: str,
    count: int,
    interval: float,
    timeout: float,
    transport: str,
    dnssec: bool,
    verbose: bool,
):
    """
    Measure response time to the given DNS server by asking it to
    resolve a specified host.

    SERVER is the DNS server hostname or IP address.

    Examples:

    \b
      # Ten A queries for wikipedia.org against Cloudflare
      dnsping 1.1.1.1

    \b
      # Five MX queries, half a second apart, over TCP
      dnsping -c 5 -W 500ms -rdatatype MX -host example.com -transport tcp dns.google
    """
    configure_logs(verbose)

    try:
        asyncio.run(ping(
            server=server,
            port=port,
            host=host,
            rdatatype=rdatatype,
            count=count,
            interval=interval,
            timeout=timeout,
            transport=Transport(transport),
            use_dnssec=dnssec,
        ))
    except (ResolutionError, InvalidRecordType, TransportError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
