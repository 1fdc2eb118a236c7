"""
Prometheus metrics for the binder operator.

Exposes operational metrics via HTTP /metrics endpoint for Prometheus scraping.

Environment Variables:
    METRICS_ENABLED: Enable metrics server (true/false) - default: false
    METRICS_PORT: HTTP port for /metrics endpoint - default: 8080

Usage:
    from binder_operator.metrics import start_metrics_server, track_event

    start_metrics_server(enabled=True, port=8080)
    track_event("accepted")

All track_* helpers are no-ops until init_metrics() has run, so library
code and tests can call them unconditionally.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

EVENTS_TOTAL: "Counter" = None  # type: ignore
FLOWS_TOTAL: "Counter" = None  # type: ignore
DISPATCH_TOTAL: "Counter" = None  # type: ignore
FLOW_QUEUE_DEPTH: "Gauge" = None  # type: ignore
FLOWS_DROPPED: "Counter" = None  # type: ignore
READY_WAIT_DURATION: "Histogram" = None  # type: ignore

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock.
    """
    global EVENTS_TOTAL, FLOWS_TOTAL, DISPATCH_TOTAL
    global FLOW_QUEUE_DEPTH, FLOWS_DROPPED, READY_WAIT_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        # Router outcomes (labels: outcome = ignored/unparsed/stale/duplicate/accepted/dropped)
        EVENTS_TOTAL = Counter(
            "binder_events_total",
            "Lifecycle events seen by the router, by outcome",
            labelnames=["outcome"],
        )

        FLOWS_TOTAL = Counter(
            "binder_flows_total",
            "Bind/unbind flows finished, by flow and result",
            labelnames=["flow", "result"],
        )

        DISPATCH_TOTAL = Counter(
            "binder_dispatch_total",
            "Action invocations, by action and result",
            labelnames=["action", "result"],
        )

        FLOW_QUEUE_DEPTH = Gauge(
            "binder_flow_queue_depth",
            "Flows waiting for a free worker",
        )

        FLOWS_DROPPED = Counter(
            "binder_flows_dropped_total",
            "Flows rejected because the flow queue was full",
        )

        READY_WAIT_DURATION = Histogram(
            "binder_ready_wait_seconds",
            "Time spent waiting for pods to become ready",
            buckets=(5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0, 1800.0, 3600.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server (from METRICS_ENABLED env var)
        port: HTTP port for /metrics endpoint (from METRICS_PORT env var)
    """
    if not enabled:
        logger.info("Metrics server disabled (METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


def track_event(outcome: str) -> None:
    if EVENTS_TOTAL is not None:
        EVENTS_TOTAL.labels(outcome=outcome).inc()


def track_flow(flow: str, result: str) -> None:
    if FLOWS_TOTAL is not None:
        FLOWS_TOTAL.labels(flow=flow, result=result).inc()


def track_dispatch(action: str, result: str) -> None:
    if DISPATCH_TOTAL is not None:
        DISPATCH_TOTAL.labels(action=action, result=result).inc()


def set_queue_depth(depth: int) -> None:
    if FLOW_QUEUE_DEPTH is not None:
        FLOW_QUEUE_DEPTH.set(depth)


def track_dropped_flow() -> None:
    if FLOWS_DROPPED is not None:
        FLOWS_DROPPED.inc()


@contextmanager
def track_ready_wait() -> Generator[None, None, None]:
    """
    Context manager for timing a readiness wait.

    Usage:
        with track_ready_wait():
            result = waiter.wait(namespace, name)
    """
    if READY_WAIT_DURATION is None:
        yield
        return

    with READY_WAIT_DURATION.time():
        yield
