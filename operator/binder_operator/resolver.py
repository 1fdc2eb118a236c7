"""Service resolution by label match."""

import logging
from typing import Dict, Iterable, Tuple

from binder.core.errors import AmbiguousService, IncompleteSelector, ServiceNotFound
from binder.core.models import Service, WorkloadInstance
from .cluster import ClusterApi

logger = logging.getLogger(__name__)

DEFAULT_SELECTOR_KEYS: Tuple[str, ...] = ("env", "logic_group", "appcode")
DEFAULT_LIST_LIMIT = 10000


def format_label_selector(labels: Dict[str, str]) -> str:
    """Render labels as an equality selector, keys sorted: "a=1,b=2"."""
    return ",".join(f"{k}={labels[k]}" for k in sorted(labels))


class ServiceResolver:
    """
    Finds the service that fronts a pod.

    The selector is built from a fixed set of the pod's own labels and run
    as a label query against services in the pod's namespace. Exactly one
    match is expected; with several, the smallest name wins unless strict
    is set, in which case the ambiguity is an error.
    """

    def __init__(
        self,
        cluster: ClusterApi,
        selector_keys: Iterable[str] = DEFAULT_SELECTOR_KEYS,
        limit: int = DEFAULT_LIST_LIMIT,
        strict: bool = False,
    ):
        self.cluster = cluster
        self.selector_keys = tuple(selector_keys)
        self.limit = limit
        self.strict = strict

    def selector_for(self, instance: WorkloadInstance) -> Dict[str, str]:
        missing = [k for k in self.selector_keys if k not in instance.labels]
        if missing:
            raise IncompleteSelector(instance.name, missing)
        return {k: instance.labels[k] for k in self.selector_keys}

    def resolve(self, instance: WorkloadInstance, namespace: str) -> Service:
        """
        Resolve the service for instance.

        Raises:
            IncompleteSelector: If instance lacks a selector label
            ServiceNotFound: If no service matches
            AmbiguousService: If several match and strict is set
            ApiException: Transport errors propagate unchanged
        """
        selector = format_label_selector(self.selector_for(instance))
        services = self.cluster.list_services(namespace, selector, self.limit)
        if not services:
            raise ServiceNotFound(instance.name)

        if len(services) > 1:
            names = [s.name for s in services]
            if self.strict:
                raise AmbiguousService(instance.name, names)
            logger.warning(
                f"pod {instance.name} matched {len(services)} services, using first by name",
                extra={"pod": instance.name, "candidates": sorted(names), "selector": selector},
            )
            return min(services, key=lambda s: s.name)

        return services[0]
