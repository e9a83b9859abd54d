"""Engine components: load → queue → check → aggregate → export."""

from .aggregator import Counters, ResultAggregator
from .deadline import DeadlineGovernor
from .exporter import BaseExporter, FileExporter
from .identifiers import load_identifiers, read_identifiers
from .oracle import JsonRpcOracle, Oracle
from .queues import CLOSED, ClosableQueue, QueueClosed
from .results import CheckResult, Outcome
from .retry import RateLimitedRetryClient, RetryPolicy
from .worker_pool import WorkerPool

__all__ = [
    "BaseExporter",
    "CLOSED",
    "CheckResult",
    "ClosableQueue",
    "Counters",
    "DeadlineGovernor",
    "FileExporter",
    "JsonRpcOracle",
    "Oracle",
    "Outcome",
    "QueueClosed",
    "RateLimitedRetryClient",
    "ResultAggregator",
    "RetryPolicy",
    "WorkerPool",
    "load_identifiers",
    "read_identifiers",
]
