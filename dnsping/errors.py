"""
Error types for dnsping.

Fatal errors end the run with exit status 1. A timeout only skips
the attempt it belongs to.
"""


class DNSPingError(Exception):
    """Base class for all dnsping errors."""


class ResolutionError(DNSPingError):
    """The DNS server hostname could not be resolved to an address."""

    def __init__(self, server: str, reason: str = ""):
        self.server = server
        self.reason = reason
        super().__init__(f"cannot resolve dns server hostname: {server}")


class InvalidRecordType(DNSPingError):
    """The requested record type is not a known DNS type mnemonic."""

    def __init__(self, record_type: str):
        self.record_type = record_type
        super().__init__(f"invalid DNS record type {record_type}")


class AttemptTimeout(DNSPingError):
    """No response arrived within the per-attempt timeout."""


class AttemptCancelled(DNSPingError):
    """The in-flight query was aborted because a stop was requested."""


class TransportError(DNSPingError):
    """Any non-timeout failure while exchanging a query with the server."""
