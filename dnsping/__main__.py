"""
Entry point for running dnsping as a module.

Usage: python -m dnsping [OPTIONS] SERVER
"""

from .cli import main

if __name__ == "__main__":
    main()
