"""
Snapshot value types.

Instances and services are fetched fresh for every decision; these classes
are plain copies of the fields the binder reads, detached from the API
objects they came from.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class WorkloadInstance:
    """Point-in-time view of a pod."""
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    address: Optional[str] = None
    ready: bool = False
    uid: str = ""

    @staticmethod
    def from_pod(pod: Any) -> "WorkloadInstance":
        """Build from a kubernetes.client.V1Pod."""
        meta = pod.metadata
        status = pod.status
        ready = False
        if status is not None:
            for condition in status.conditions or []:
                if condition.type == "Ready":
                    ready = condition.status == "True"
                    break
        return WorkloadInstance(
            name=meta.name,
            namespace=meta.namespace,
            labels=dict(meta.labels or {}),
            address=status.pod_ip if status is not None else None,
            ready=ready,
            uid=meta.uid or "",
        )


@dataclass(frozen=True)
class Service:
    """
    Service snapshot.

    labels are what a label query matches against; selector is the pod
    selector the service routes to.
    """
    name: str
    namespace: str
    labels: Dict[str, str] = field(default_factory=dict)
    selector: Dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_v1(svc: Any) -> "Service":
        """Build from a kubernetes.client.V1Service."""
        spec = svc.spec
        return Service(
            name=svc.metadata.name,
            namespace=svc.metadata.namespace,
            labels=dict(svc.metadata.labels or {}),
            selector=dict((spec.selector if spec is not None else None) or {}),
        )


@dataclass(frozen=True)
class BindingTask:
    """Pairing of a pod address and a service name, built right before dispatch."""
    address: str
    service_name: str
    pod_name: str = ""
    namespace: str = ""
