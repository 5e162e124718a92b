"""
Prometheus metrics for allocation monitoring.
"""

import asyncio
import os
import time
from functools import wraps
from typing import Callable

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)

registry = CollectorRegistry()
prometheus_multiproc_dir = os.getenv("PROMETHEUS_MULTIPROC_DIR")

if prometheus_multiproc_dir and os.path.isdir(prometheus_multiproc_dir):
    try:
        multiprocess.MultiProcessCollector(registry)
    except ValueError as e:
        print(f"Warning: Failed to initialize multiprocess collector: {e}")
        registry = CollectorRegistry()


def get_registry():
    """Get the current registry."""
    return registry


ALLOCATION_ACTIONS = Counter(
    "allocation_actions_total",
    "Total number of allocation actions by outcome",
    ["action", "outcome"],
    registry=registry,
)

JOB_COMPLETIONS = Counter(
    "job_completions_total",
    "Total number of completed jobs",
    ["has_invoice"],
    registry=registry,
)

ACTION_DURATION = Histogram(
    "allocation_action_duration_seconds",
    "Time spent handling allocation actions",
    ["action"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
    registry=registry,
)

GATEWAY_REQUEST_DURATION = Histogram(
    "compliance_api_request_duration_seconds",
    "Time spent calling the compliance API",
    ["method", "status_code"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
    registry=registry,
)

BOARD_REFRESHES = Counter(
    "allocation_board_refreshes_total",
    "Total number of full board refetches",
    ["reason"],
    registry=registry,
)


def track_action_duration(action: str):
    """
    Decorator to observe how long an allocation action takes.

    Args:
        action: Action label (assign, claim, complete, update, create)
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                ACTION_DURATION.labels(action=action).observe(time.time() - start_time)

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                ACTION_DURATION.labels(action=action).observe(time.time() - start_time)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def record_allocation_action(action: str, outcome: str):
    """Record an allocation action outcome (success or an error type)."""
    ALLOCATION_ACTIONS.labels(action=action, outcome=outcome).inc()


def record_job_completion(has_invoice: bool):
    """Record job completion metric."""
    JOB_COMPLETIONS.labels(has_invoice=str(has_invoice).lower()).inc()


def record_gateway_request(method: str, status_code: int, duration: float):
    """Record compliance API call duration."""
    GATEWAY_REQUEST_DURATION.labels(
        method=method, status_code=str(status_code)
    ).observe(duration)


def record_board_refresh(reason: str):
    """Record a full board refetch."""
    BOARD_REFRESHES.labels(reason=reason).inc()


def get_metrics():
    """Get all metrics in Prometheus format."""
    return generate_latest(registry)


def get_metrics_content_type():
    """Get the content type for metrics."""
    return CONTENT_TYPE_LATEST
