"""Prometheus metrics for store operations."""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

STORE_OPERATIONS = Counter(
    "mflix_store_operations_total",
    "Total number of store operations",
    labelnames=["store", "operation", "status"],
)

STORE_LATENCY = Histogram(
    "mflix_store_operation_latency_seconds",
    "Store operation latency in seconds",
    labelnames=["store", "operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)


@contextmanager
def track_operation(store: str, operation: str) -> Iterator[None]:
    """Record latency and outcome of a store operation.

    The status label is the exception class name when the block raises,
    ``ok`` otherwise. Exceptions are re-raised unchanged.
    """
    start = time.perf_counter()
    status = "ok"
    try:
        yield
    except Exception as e:
        status = type(e).__name__
        raise
    finally:
        STORE_LATENCY.labels(store=store, operation=operation).observe(
            time.perf_counter() - start
        )
        STORE_OPERATIONS.labels(store=store, operation=operation, status=status).inc()
