"""Diagnostic logging setup. Log records go to stderr, never to stdout."""

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logs"]


def configure_logs(verbose: bool = False) -> None:
    """Configure stderr logging.

    Sets up:
    - Root logger at WARNING level.
    - Framework loggers (httpx, httpcore, asyncio) at WARNING level.
    - Application loggers (dnsping) at DEBUG when verbose, else WARNING.
    """
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    logging.getLogger("dnsping").setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Suppress verbose framework loggers
    for name in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if any(isinstance(h, RichHandler) for h in root.handlers):
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        log_time_format="%d/%m/%y %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(name)s:%(lineno)d - %(message)s"))
    root.addHandler(handler)
