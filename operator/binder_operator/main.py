"""
kopf entry point for the pod upstream binder.

Run with:
    upstream-binder run
or:
    kopf run --standalone --namespace prod -m binder_operator.main
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional

import kopf

from binder.core.clock import SystemClock
from binder.core.errors import ConfigError
from binder.validation import EventValidator, RecentEventWindow
from .cluster import KubeClusterApi, load_cluster_config
from .dispatcher import ActionDispatcher
from .flow_pool import FlowPool
from .logging_config import get_logger, setup_logging
from .metrics import start_metrics_server
from .readiness import ReadinessWaiter
from .resolver import ServiceResolver
from .router import EventRouter
from .settings import BinderConfig

router: Optional[EventRouter] = None
flow_pool: Optional[FlowPool] = None
unbind_pool: Optional[FlowPool] = None
action_executor: Optional[ThreadPoolExecutor] = None


def build_router(config: BinderConfig, cluster, started_at: datetime, clock=None) -> EventRouter:
    """Wire the router and its collaborators. The caller starts the pools."""
    global flow_pool, unbind_pool, action_executor

    clock = clock or SystemClock()
    flow_pool = FlowPool(workers=config.flow_workers, queue_size=config.flow_queue_size)
    unbind_pool = FlowPool(workers=config.unbind_workers, queue_size=config.flow_queue_size, name="BinderUnbind")
    action_executor = ThreadPoolExecutor(max_workers=config.action_workers, thread_name_prefix="BinderAction")

    dedup = None
    if config.dedup_window_seconds > 0:
        dedup = RecentEventWindow(config.dedup_window_seconds, clock)

    return EventRouter(
        config=config,
        cluster=cluster,
        validator=EventValidator(started_at),
        resolver=ServiceResolver(
            cluster,
            selector_keys=config.selector_keys,
            limit=config.service_list_limit,
            strict=config.strict_service_match,
        ),
        waiter=ReadinessWaiter(
            cluster,
            clock=clock,
            interval=config.poll_interval_seconds,
            timeout=config.ready_timeout_seconds,
        ),
        dispatcher=ActionDispatcher(action_executor),
        pool=flow_pool,
        dedup=dedup,
        clock=clock,
        unbind_pool=unbind_pool,
    )


@kopf.on.startup()
def _startup(settings: kopf.OperatorSettings, **_):
    global router

    setup_logging()
    logger = get_logger(__name__)

    # The binder watches Events; posting its own would feed back into the watch.
    settings.posting.enabled = False

    try:
        config = BinderConfig.from_env()
        load_cluster_config()
    except ConfigError as e:
        logger.error(f"Startup failed: {e}")
        raise kopf.PermanentError(str(e)) from e

    start_metrics_server(enabled=config.metrics_enabled, port=config.metrics_port)

    started_at = datetime.now(timezone.utc)
    router = build_router(config, KubeClusterApi(), started_at)
    flow_pool.start()
    unbind_pool.start()

    logger.info("Operator startup complete", extra={
        "watch_namespace": config.watch_namespace,
        "watch_kind": config.watch_kind,
        "started_at": started_at.isoformat(),
        "metrics_enabled": config.metrics_enabled,
    })


@kopf.on.event('', 'v1', 'events')
def lifecycle_event(event, **_):
    # type is None for objects from the initial listing, ADDED/MODIFIED/DELETED afterwards
    if router is None or event.get("type") == "MODIFIED":
        return
    router.on_event(event.get("object") or {})


@kopf.on.cleanup()
def _cleanup(**_):
    # Halt intake only. Queued flows still dispatch, so the action executor stays open.
    for pool in (flow_pool, unbind_pool):
        if pool is not None:
            pool.stop()


def run(namespace: Optional[str] = None) -> None:
    """Run the operator standalone, scoped to the watched namespace."""
    if namespace is None:
        namespace = BinderConfig.from_env().watch_namespace
    kopf.run(standalone=True, namespaces=[namespace])
