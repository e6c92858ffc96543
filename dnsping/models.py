"""
Data models for dnsping.

Defines the run configuration, per-attempt outcomes and the
summary statistics produced at the end of a run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import dns.rdatatype


NANOS_PER_MILLI = 1_000_000.0


def ns_to_ms(nanoseconds: int) -> float:
    """Convert a nanosecond duration to floating point milliseconds."""
    return nanoseconds / NANOS_PER_MILLI


class Transport(Enum):
    """DNS transport protocols."""
    UDP = "udp"
    TCP = "tcp"
    DOT = "dot"  # DNS over TLS
    DOH = "doh"  # DNS over HTTPS

    @property
    def default_port(self) -> int:
        """Well-known server port for this transport."""
        if self == Transport.DOT:
            return 853
        if self == Transport.DOH:
            return 443
        return 53


class AttemptStatus(Enum):
    """How a single probe attempt ended."""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class RunConfig:
    """Validated, immutable configuration for one dnsping run."""
    server_address: str
    port: int
    host_name: str
    record_type: dns.rdatatype.RdataType
    count: int
    interval: float  # seconds
    timeout: float   # seconds
    transport: Transport = Transport.UDP
    server_name: Optional[str] = None  # server as given on the command line
    use_dnssec: bool = False

    @property
    def record_type_text(self) -> str:
        """Mnemonic of the queried record type."""
        return dns.rdatatype.to_text(self.record_type)

    @property
    def tls_server_name(self) -> str:
        """Name presented for TLS (DoT/DoH): the original server argument."""
        return self.server_name or self.server_address


@dataclass(frozen=True)
class TimingBreakdown:
    """Timing of one query, in nanoseconds."""
    total_ns: int
    connection_ns: int = 0  # TCP/TLS handshake time

    @property
    def total_ms(self) -> float:
        return ns_to_ms(self.total_ns)

    @property
    def connection_ms(self) -> float:
        return ns_to_ms(self.connection_ns)


@dataclass(frozen=True)
class QueryResult:
    """A response received from the DNS server."""
    response_size: int
    answer_count: int
    rcode: int
    timing: TimingBreakdown

    @property
    def has_answer(self) -> bool:
        return self.answer_count > 0


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of a single probe attempt, reported as soon as it ends."""
    sequence: int
    status: AttemptStatus
    result: Optional[QueryResult] = None

    @property
    def response_size(self) -> int:
        return self.result.response_size if self.result else 0

    @property
    def round_trip_ns(self) -> int:
        return self.result.timing.total_ns if self.result else 0

    @property
    def round_trip_ms(self) -> float:
        return ns_to_ms(self.round_trip_ns)

    @property
    def has_answer(self) -> bool:
        return self.result is not None and self.result.has_answer


@dataclass
class ProbeRun:
    """What the probe loop collected: attempts sent and successful durations."""
    requests_sent: int = 0
    samples: list[int] = field(default_factory=list)  # nanoseconds
    timeouts: int = 0
    cancelled: bool = False

    @property
    def responses_received(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class RunStats:
    """Summary statistics for a finished run (milliseconds)."""
    requests_sent: int
    responses_received: int
    lost_percent: float
    min_ms: float
    avg_ms: float
    max_ms: float
    stddev_ms: float
