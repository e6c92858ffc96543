"""
DNS transport implementations.

Provides transport classes for different DNS protocols:
- UDP (standard DNS)
- TCP (DNS over TCP)
- DoT (DNS over TLS)
- DoH (DNS over HTTPS)

Each transport sends one query and measures its round trip.
"""

import asyncio
import ssl
import struct
import time
from abc import ABC, abstractmethod
from typing import Optional

import dns.asyncquery
import dns.message
import dns.query
import httpx

from .models import RunConfig, TimingBreakdown, Transport


class BaseTransport(ABC):
    """Base class for DNS transports."""

    transport_type: Transport

    @abstractmethod
    async def query(
        self,
        message: dns.message.Message,
        address: str,
        port: int,
        timeout: float,
    ) -> tuple[dns.message.Message, TimingBreakdown]:
        """
        Send a DNS query and return the response.

        Returns:
            Tuple of (response, timing_breakdown)
        """
        pass

    async def close(self):
        """Release any pooled connections."""


class UDPTransport(BaseTransport):
    """Standard DNS over UDP."""

    transport_type = Transport.UDP

    async def query(
        self,
        message: dns.message.Message,
        address: str,
        port: int,
        timeout: float,
    ) -> tuple[dns.message.Message, TimingBreakdown]:
        """Send DNS query over UDP."""
        start = time.perf_counter_ns()

        response = await dns.asyncquery.udp(
            message,
            address,
            timeout=timeout,
            port=port,
        )

        end = time.perf_counter_ns()

        # UDP is connectionless
        return response, TimingBreakdown(total_ns=end - start)


class _StreamTransport(BaseTransport):
    """Length-prefixed DNS over a stream connection (RFC 1035 4.2.2)."""

    @abstractmethod
    async def _connect(
        self,
        address: str,
        port: int,
    ) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        pass

    async def query(
        self,
        message: dns.message.Message,
        address: str,
        port: int,
        timeout: float,
    ) -> tuple[dns.message.Message, TimingBreakdown]:
        """Send DNS query over a fresh stream connection."""
        connect_start = time.perf_counter_ns()

        reader, writer = await asyncio.wait_for(
            self._connect(address, port),
            timeout=timeout,
        )

        connect_end = time.perf_counter_ns()

        try:
            wire = message.to_wire()
            writer.write(struct.pack("!H", len(wire)) + wire)
            await writer.drain()

            length_data = await reader.readexactly(2)
            response_length = struct.unpack("!H", length_data)[0]
            response_data = await reader.readexactly(response_length)

            end = time.perf_counter_ns()
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ssl.SSLError):
                pass

        response = dns.message.from_wire(response_data)
        if not message.is_response(response):
            raise dns.query.BadResponse

        timing = TimingBreakdown(
            total_ns=end - connect_start,
            connection_ns=connect_end - connect_start,
        )

        return response, timing


class TCPTransport(_StreamTransport):
    """DNS over TCP."""

    transport_type = Transport.TCP

    async def _connect(self, address: str, port: int):
        return await asyncio.open_connection(address, port)


class DoTTransport(_StreamTransport):
    """DNS over TLS (DoT)."""

    transport_type = Transport.DOT

    def __init__(self, hostname: str):
        """
        Initialize DoT transport.

        Args:
            hostname: TLS hostname for certificate verification
        """
        self.hostname = hostname
        self._ssl_context = ssl.create_default_context()

    async def _connect(self, address: str, port: int):
        return await asyncio.open_connection(
            address,
            port,
            ssl=self._ssl_context,
            server_hostname=self.hostname,
        )


class DoHTransport(BaseTransport):
    """DNS over HTTPS (DoH)."""

    transport_type = Transport.DOH

    def __init__(self, url: str):
        """
        Initialize DoH transport.

        Args:
            url: DoH endpoint URL (e.g., https://dns.google/dns-query)
        """
        self.url = url
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self, timeout: float) -> httpx.AsyncClient:
        """Get or create HTTP/2 client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                http2=True,
                timeout=httpx.Timeout(timeout),
            )
        return self._client

    async def query(
        self,
        message: dns.message.Message,
        address: str,  # Not used for DoH, URL determines endpoint
        port: int,
        timeout: float,
    ) -> tuple[dns.message.Message, TimingBreakdown]:
        """Send DNS query over HTTPS."""
        client = self._get_client(timeout)

        # Measure full request time (includes connection if not pooled)
        start = time.perf_counter_ns()

        response = await client.post(
            self.url,
            content=message.to_wire(),
            headers={
                "Content-Type": "application/dns-message",
                "Accept": "application/dns-message",
            },
        )

        end = time.perf_counter_ns()

        response.raise_for_status()

        dns_response = dns.message.from_wire(response.content)
        if not message.is_response(dns_response):
            raise dns.query.BadResponse

        return dns_response, TimingBreakdown(total_ns=end - start)

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


def doh_url(config: RunConfig) -> str:
    """Build the DoH endpoint URL for a run."""
    host = config.tls_server_name
    if ":" in host:
        host = f"[{host}]"  # IPv6 literal
    return f"https://{host}:{config.port}/dns-query"


def create_transport(config: RunConfig) -> BaseTransport:
    """
    Create a transport instance for the configured protocol.

    Args:
        config: Run configuration

    Returns:
        Appropriate transport instance
    """
    if config.transport == Transport.UDP:
        return UDPTransport()
    elif config.transport == Transport.TCP:
        return TCPTransport()
    elif config.transport == Transport.DOT:
        return DoTTransport(config.tls_server_name)
    elif config.transport == Transport.DOH:
        return DoHTransport(doh_url(config))
    else:
        raise ValueError(f"Unknown transport type: {config.transport}")
