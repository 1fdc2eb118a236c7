"""
Event router: the per-event entry point of the binder.

on_event() runs on the watch delivery path, so it only filters, classifies
and validates. Anything that talks to the cluster runs as a flow on the
FlowPools:

    Started  -> wait ready -> settle -> fetch pod -> resolve svc -> bind
    Killing  -> fetch pod -> resolve svc -> unbind
"""

import enum
import logging
from typing import Any, Optional

from binder.core.clock import Clock, SystemClock
from binder.core.errors import BinderError, EventParseError, ResolutionError
from binder.core.events import LifecycleEvent
from binder.core.models import WorkloadInstance
from binder.validation import EventValidator, RecentEventWindow
from .cluster import ClusterApi
from .dispatcher import BIND, UNBIND, ActionDispatcher
from .flow_pool import FlowPool
from .logging_config import get_logger
from .metrics import track_event, track_flow, track_ready_wait
from .readiness import ReadinessWaiter
from .resolver import ServiceResolver
from .settings import BinderConfig

logger = logging.getLogger(__name__)

NORMAL = "Normal"


class Transition(enum.Enum):
    START = "start"
    KILL = "kill"


def is_watched(event: LifecycleEvent, config: BinderConfig) -> bool:
    return event.kind == config.watch_kind and event.namespace == config.watch_namespace


def classify(event: LifecycleEvent, config: BinderConfig) -> Optional[Transition]:
    """Map a Normal start/kill event to its transition, anything else to None."""
    if event.type != NORMAL:
        return None
    if event.reason == config.start_reason:
        return Transition.START
    if event.reason == config.kill_reason:
        return Transition.KILL
    return None


class EventRouter:
    def __init__(
        self,
        config: BinderConfig,
        cluster: ClusterApi,
        validator: EventValidator,
        resolver: ServiceResolver,
        waiter: ReadinessWaiter,
        dispatcher: ActionDispatcher,
        pool: FlowPool,
        dedup: Optional[RecentEventWindow] = None,
        clock: Clock = None,
        unbind_pool: Optional[FlowPool] = None,
    ):
        self.config = config
        self.cluster = cluster
        self.validator = validator
        self.resolver = resolver
        self.waiter = waiter
        self.dispatcher = dispatcher
        self.pool = pool
        # Unbind flows run apart from bind flows parked in readiness waits
        self.unbind_pool = unbind_pool or pool
        self.dedup = dedup
        self.clock = clock or SystemClock()

    def on_event(self, raw: Any) -> None:
        """Handle one delivered event. Never raises, never blocks on I/O."""
        try:
            event = LifecycleEvent.from_raw(raw)
        except EventParseError as e:
            logger.debug(f"Ignoring unparseable object: {e}")
            track_event("unparsed")
            return

        if not self.is_watched(event):
            track_event("ignored")
            return

        transition = self.classify(event)
        if transition is None:
            track_event("ignored")
            return

        if not self.validator.is_valid(event):
            logger.debug(
                f"Dropping stale or repeated event for {event.namespace}/{event.name}",
                extra={"reason": event.reason, "count": event.count},
            )
            track_event("stale")
            return

        key = (event.uid, event.reason)
        if self.dedup is not None and self.dedup.check_and_record(key):
            logger.info(f"Dropping duplicate {event.reason} for {event.namespace}/{event.name}")
            track_event("duplicate")
            return

        track_event("accepted")
        get_logger(__name__, trace_id=event.uid).info(
            "pod status changed",
            extra={
                "pod": event.name,
                "type": event.type,
                "reason": event.reason,
                "action": "Mount" if transition is Transition.START else "Umount",
                "uid": event.uid,
            },
        )
        if transition is Transition.START:
            accepted = self.pool.submit(self.bind_flow, event)
        else:
            accepted = self.unbind_pool.submit(self.unbind_flow, event)
        if not accepted:
            # A dropped flow leaves no dedup record
            if self.dedup is not None:
                self.dedup.forget(key)
            track_event("dropped")

    def is_watched(self, event: LifecycleEvent) -> bool:
        return is_watched(event, self.config)

    def classify(self, event: LifecycleEvent) -> Optional[Transition]:
        return classify(event, self.config)

    def bind_flow(self, event: LifecycleEvent) -> None:
        log = get_logger(__name__, trace_id=event.uid)
        namespace, name = event.namespace, event.name

        with track_ready_wait():
            result = self.waiter.wait(namespace, name)
        if not result.ready:
            log.info(f"pod {namespace}/{name} not ready after {result.elapsed:.0f}s, giving up")
            track_flow(BIND, "timeout")
            return

        self.clock.sleep(self.config.settle_seconds)

        instance = self._fetch(log, namespace, name)
        if instance is None:
            track_flow(BIND, "fetch_failed")
            return
        self._resolve_and_dispatch(log, BIND, instance, namespace)

    def unbind_flow(self, event: LifecycleEvent) -> None:
        log = get_logger(__name__, trace_id=event.uid)
        instance = self._fetch(log, event.namespace, event.name)
        if instance is None:
            track_flow(UNBIND, "fetch_failed")
            return
        self._resolve_and_dispatch(log, UNBIND, instance, event.namespace)

    def _fetch(self, log, namespace: str, name: str) -> Optional[WorkloadInstance]:
        try:
            instance = self.cluster.get_instance(namespace, name)
        except Exception as e:
            log.error(f"Failed to fetch pod {namespace}/{name}: {e}")
            return None
        log.info("podObject", extra={"pod": instance.name, "ip": instance.address})
        return instance

    def _resolve_and_dispatch(self, log, action: str, instance: WorkloadInstance, namespace: str) -> None:
        try:
            service = self.resolver.resolve(instance, namespace)
        except ResolutionError as e:
            log.error(str(e))
            track_flow(action, "unresolved")
            return
        except Exception as e:
            log.error(f"Service lookup for pod {namespace}/{instance.name} failed: {e}")
            track_flow(action, "fetch_failed")
            return

        try:
            future = self.dispatcher.dispatch(action, instance, service)
        except (BinderError, ValueError, RuntimeError) as e:
            log.error(f"Dispatch of {action} for pod {namespace}/{instance.name} failed: {e}")
            track_flow(action, "dispatch_failed")
            return
        track_flow(action, "dispatched" if future is not None else "skipped")
