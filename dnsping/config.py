"""
Run configuration resolution.

Turns raw command-line values into a validated RunConfig: checks the
record type mnemonic and resolves a server hostname to an IP address.
"""

import asyncio
import ipaddress
import math
import logging
import socket
from typing import Awaitable, Callable, Optional

import dns.exception
import dns.rdatatype

from .errors import InvalidRecordType, ResolutionError
from .models import RunConfig, Transport


logger = logging.getLogger(__name__)

# Returns the addresses a hostname resolves to, in resolver order
LookupFn = Callable[[str], Awaitable[list[str]]]


def is_ip_address(value: str) -> bool:
    """Check if value is a literal IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def parse_record_type(text: str) -> dns.rdatatype.RdataType:
    """
    Validate a DNS record type mnemonic.

    Mnemonics are case-sensitive ("A", not "a"). Generic ``TYPEnnn``
    spellings are rejected; only named types are accepted.

    Raises:
        InvalidRecordType: if the mnemonic is unknown
    """
    try:
        rdtype = dns.rdatatype.from_text(text)
    except (dns.exception.DNSException, ValueError) as e:
        raise InvalidRecordType(text) from e

    canonical = dns.rdatatype.to_text(rdtype)
    if canonical != text or canonical.startswith("TYPE"):
        raise InvalidRecordType(text)
    return rdtype


async def system_lookup(hostname: str) -> list[str]:
    """Resolve a hostname with the operating system resolver."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_DGRAM)

    addresses = []
    for _family, _type, _proto, _canonname, sockaddr in infos:
        address = sockaddr[0]
        if address not in addresses:
            addresses.append(address)
    return addresses


async def resolve_server(server: str, lookup: Optional[LookupFn] = None) -> str:
    """
    Return the IP address to send queries to.

    A literal IP is returned unchanged without any lookup. Otherwise the
    first address returned by the lookup is used.

    Raises:
        ResolutionError: if the lookup fails or returns nothing
    """
    if is_ip_address(server):
        return server

    lookup = lookup or system_lookup
    try:
        addresses = await lookup(server)
    except (OSError, dns.exception.DNSException) as e:
        raise ResolutionError(server, str(e)) from e

    if not addresses:
        raise ResolutionError(server, "no addresses returned")

    logger.debug("Resolved %s to %s (candidates: %s)", server, addresses[0], addresses)
    return addresses[0]


async def build_run_config(
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
) -> RunConfig:
    """
    Build a validated RunConfig from raw inputs.

    The record type is checked before the server is resolved, so a bad
    type never causes network traffic.

    Args:
        server: DNS server hostname or IP address
        port: Server port, or None for the transport's well-known port
        host: Name to ask the server to resolve
        rdatatype: Record type mnemonic (e.g. "A", "MX")
        count: Number of attempts
        interval: Pacing interval in seconds
        timeout: Per-attempt timeout in seconds
        transport: Transport protocol to use
        use_dnssec: Whether to set the DNSSEC OK bit
        lookup: Hostname lookup to use instead of the system resolver

    Raises:
        InvalidRecordType: if rdatatype is not a known mnemonic
        ResolutionError: if the server hostname cannot be resolved
    """
    if count < 0:
        raise ValueError(f"count must not be negative: {count}")
    for name, value in (("interval", interval), ("timeout", timeout)):
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"{name} must be a finite, non-negative duration: {value}")

    record_type = parse_record_type(rdatatype)
    server_address = await resolve_server(server, lookup)

    return RunConfig(
        server_address=server_address,
        port=port if port is not None else transport.default_port,
        host_name=host,
        record_type=record_type,
        count=count,
        interval=interval,
        timeout=timeout,
        transport=transport,
        server_name=server,
        use_dnssec=use_dnssec,
    )
