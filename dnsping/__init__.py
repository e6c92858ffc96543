"""
dnsping - measure DNS server response time, like ping(8) for DNS.

Repeatedly asks one DNS server to resolve the same name and reports
per-query round-trip times and summary statistics.
"""

__version__ = "1.0.0"

from .models import AttemptOutcome, QueryResult, RunConfig, RunStats
from .query_engine import DNSQueryEngine
from .runner import ProbeRunner
from .statistics import calculate_run_stats

__all__ = [
    "__version__",
    "AttemptOutcome",
    "QueryResult",
    "RunConfig",
    "RunStats",
    "DNSQueryEngine",
    "ProbeRunner",
    "calculate_run_stats",
]
