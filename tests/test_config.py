"""Tests for run configuration resolution."""

import socket
from unittest.mock import AsyncMock

import dns.rdatatype
import pytest

from dnsping.config import build_run_config, is_ip_address, parse_record_type, resolve_server
from dnsping.errors import InvalidRecordType, ResolutionError
from dnsping.models import Transport

__all__ = []


def build_kwargs(**overrides) -> dict:
    values = dict(
        server="192.0.2.1",
        port=None,
        host="wikipedia.org",
        rdatatype="A",
        count=10,
        interval=1.0,
        timeout=2.0,
    )
    values.update(overrides)
    return values


@pytest.mark.parametrize("value", ["8.8.8.8", "::1", "2606:4700:4700::1111"])
def test_is_ip_address_accepts_literals(value: str) -> None:
    assert is_ip_address(value)


@pytest.mark.parametrize("value", ["dns.google", "8.8.8", "", "localhost"])
def test_is_ip_address_rejects_names(value: str) -> None:
    assert not is_ip_address(value)


@pytest.mark.parametrize("text,expected", [("A", dns.rdatatype.A), ("MX", dns.rdatatype.MX), ("AAAA", dns.rdatatype.AAAA)])
def test_parse_record_type(text: str, expected: dns.rdatatype.RdataType) -> None:
    assert parse_record_type(text) == expected


@pytest.mark.parametrize("text", ["BOGUS", "TYPE123", "", "TYPE99999", "aaaa", "Mx"])
def test_parse_record_type_rejects_unknown(text: str) -> None:
    with pytest.raises(InvalidRecordType):
        parse_record_type(text)


@pytest.mark.asyncio
async def test_literal_ip_skips_lookup() -> None:
    lookup = AsyncMock(return_value=["203.0.113.9"])

    address = await resolve_server("198.51.100.7", lookup=lookup)

    assert address == "198.51.100.7"
    lookup.assert_not_called()


@pytest.mark.asyncio
async def test_hostname_uses_first_address() -> None:
    lookup = AsyncMock(return_value=["203.0.113.9", "203.0.113.10"])

    address = await resolve_server("ns.example", lookup=lookup)

    assert address == "203.0.113.9"
    lookup.assert_awaited_once_with("ns.example")


@pytest.mark.asyncio
async def test_lookup_error_is_resolution_error() -> None:
    lookup = AsyncMock(side_effect=socket.gaierror(-2, "Name or service not known"))

    with pytest.raises(ResolutionError) as exc_info:
        await resolve_server("nope.invalid", lookup=lookup)

    assert "nope.invalid" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_lookup_is_resolution_error() -> None:
    with pytest.raises(ResolutionError):
        await resolve_server("empty.example", lookup=AsyncMock(return_value=[]))


@pytest.mark.asyncio
async def test_build_run_config() -> None:
    config = await build_run_config(**build_kwargs(rdatatype="NS", count=4))

    assert config.server_address == "192.0.2.1"
    assert config.port == 53
    assert config.record_type == dns.rdatatype.NS
    assert config.record_type_text == "NS"
    assert config.count == 4
    assert config.transport == Transport.UDP
    assert config.server_name == "192.0.2.1"


@pytest.mark.asyncio
async def test_build_run_config_is_immutable() -> None:
    config = await build_run_config(**build_kwargs())

    with pytest.raises(AttributeError):
        config.count = 99


@pytest.mark.asyncio
async def test_bogus_type_fails_before_lookup() -> None:
    lookup = AsyncMock(return_value=["203.0.113.9"])

    with pytest.raises(InvalidRecordType):
        await build_run_config(**build_kwargs(server="ns.example", rdatatype="BOGUS"), lookup=lookup)

    lookup.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "transport,port",
    [(Transport.UDP, 53), (Transport.TCP, 53), (Transport.DOT, 853), (Transport.DOH, 443)],
)
async def test_default_port_follows_transport(transport: Transport, port: int) -> None:
    config = await build_run_config(**build_kwargs(transport=transport))

    assert config.port == port


@pytest.mark.asyncio
async def test_explicit_port_wins() -> None:
    config = await build_run_config(**build_kwargs(port=5353, transport=Transport.DOT))

    assert config.port == 5353


@pytest.mark.asyncio
async def test_hostname_kept_as_server_name() -> None:
    config = await build_run_config(
        **build_kwargs(server="dns.example", transport=Transport.DOT),
        lookup=AsyncMock(return_value=["203.0.113.5"]),
    )

    assert config.server_address == "203.0.113.5"
    assert config.tls_server_name == "dns.example"


@pytest.mark.asyncio
async def test_negative_count_rejected() -> None:
    with pytest.raises(ValueError):
        await build_run_config(**build_kwargs(count=-1))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"interval": float("nan")},
        {"interval": float("inf")},
        {"timeout": float("nan")},
        {"timeout": -1.0},
    ],
)
async def test_non_finite_or_negative_durations_rejected(overrides: dict) -> None:
    lookup = AsyncMock()

    with pytest.raises(ValueError):
        await build_run_config(**build_kwargs(lookup=lookup, **overrides))

    lookup.assert_not_awaited()
