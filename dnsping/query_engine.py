"""
Core DNS query engine.

Executes one timed DNS exchange per call and classifies failures
as either a timeout or a transport error.
"""

import asyncio
import logging

import dns.exception
import dns.message
import dns.rcode
import httpx

from .errors import AttemptTimeout, TransportError
from .models import QueryResult, RunConfig, Transport
from .transports import BaseTransport, create_transport


logger = logging.getLogger(__name__)


class DNSQueryEngine:
    """
    Single-shot DNS query engine.

    Executes DNS queries using the configured transport with
    nanosecond-precision timing. There are no retries: each call is
    exactly one attempt.
    """

    def __init__(
        self,
        timeout: float = 2.0,
        use_dnssec: bool = False,
    ):
        """
        Initialize the query engine.

        Args:
            timeout: Per-attempt timeout in seconds
            use_dnssec: Whether to set the DNSSEC OK bit
        """
        self.timeout = timeout
        self.use_dnssec = use_dnssec
        self._transports: dict[Transport, BaseTransport] = {}

    def _get_transport(self, config: RunConfig) -> BaseTransport:
        """Get or create a transport for the run."""
        if config.transport not in self._transports:
            self._transports[config.transport] = create_transport(config)
        return self._transports[config.transport]

    def _create_query_message(self, config: RunConfig) -> dns.message.Message:
        """Create a DNS query message with recursion desired."""
        return dns.message.make_query(
            config.host_name,
            config.record_type,
            want_dnssec=self.use_dnssec,
        )

    async def query(self, config: RunConfig) -> QueryResult:
        """
        Execute a single DNS query against the configured server.

        Args:
            config: Run configuration naming server, port and question

        Returns:
            QueryResult with response size, answer count and timing

        Raises:
            AttemptTimeout: if no response arrived within the timeout
            TransportError: on any other network or protocol failure
        """
        message = self._create_query_message(config)
        transport = self._get_transport(config)

        try:
            response, timing = await asyncio.wait_for(
                transport.query(
                    message,
                    config.server_address,
                    config.port,
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        # Timeout classes must come first: TimeoutError is an OSError and
        # httpx.TimeoutException is an httpx.HTTPError.
        except (asyncio.TimeoutError, TimeoutError, dns.exception.Timeout, httpx.TimeoutException) as e:
            raise AttemptTimeout(f"Query timed out after {self.timeout}s") from e
        except (OSError, EOFError, dns.exception.DNSException, httpx.HTTPError) as e:
            raise TransportError(str(e) or type(e).__name__) from e

        answer_count = sum(len(rrset) for rrset in response.answer)
        result = QueryResult(
            response_size=len(response.to_wire()),
            answer_count=answer_count,
            rcode=response.rcode(),
            timing=timing,
        )
        logger.debug(
            "%s from %s:%d rcode=%s answers=%d connect=%.3fms",
            config.transport.value,
            config.server_address,
            config.port,
            dns.rcode.to_text(result.rcode),
            answer_count,
            timing.connection_ms,
        )
        return result

    async def close(self):
        """Close all transport connections."""
        for transport in self._transports.values():
            await transport.close()
        self._transports.clear()
