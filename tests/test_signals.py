"""Tests for interrupt handling."""

import asyncio
import os
import signal
from unittest.mock import Mock

import pytest

from dnsping.cancellation import RunState, StopContext
from dnsping.signals import install_interrupt_handler

__all__ = []


@pytest.mark.asyncio
async def test_first_interrupt_requests_stop() -> None:
    """First SIGINT should move the stop context to STOP_REQUESTED."""
    stop = StopContext()
    on_force_exit = Mock()
    install_interrupt_handler(stop, on_force_exit=on_force_exit)
    try:
        assert stop.is_stopping() is False

        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.sleep(0.1)

        assert stop.state == RunState.STOP_REQUESTED
        on_force_exit.assert_not_called()
    finally:
        loop = asyncio.get_running_loop()
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)


@pytest.mark.asyncio
async def test_second_interrupt_forces_exit() -> None:
    stop = StopContext()
    on_force_exit = Mock()
    install_interrupt_handler(stop, on_force_exit=on_force_exit)
    try:
        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.sleep(0.1)
        os.kill(os.getpid(), signal.SIGINT)
        await asyncio.sleep(0.1)

        assert stop.state == RunState.FORCE_EXIT
        on_force_exit.assert_called_once()
    finally:
        loop = asyncio.get_running_loop()
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)


@pytest.mark.asyncio
async def test_interrupt_aborts_in_flight_wait() -> None:
    stop = StopContext()
    install_interrupt_handler(stop, on_force_exit=Mock())
    try:
        asyncio.get_running_loop().call_later(0.05, os.kill, os.getpid(), signal.SIGINT)

        await asyncio.wait_for(stop.sleep(10), timeout=2)

        assert stop.is_stopping()
    finally:
        loop = asyncio.get_running_loop()
        loop.remove_signal_handler(signal.SIGINT)
        loop.remove_signal_handler(signal.SIGTERM)
