"""
Cluster API handle.

The binder reads two things from the cluster: single pods and label-matched
service lists. Components receive a ClusterApi at construction instead of
reaching for a module-level client, so tests can pass a fake.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import kubernetes
from kubernetes import client
from kubernetes.client.rest import ApiException

from binder.core.errors import ConfigError, InstanceNotFound
from binder.core.models import Service, WorkloadInstance


def load_cluster_config() -> None:
    """
    Load cluster credentials.

    Tries in-cluster config first, falls back to kubeconfig for local
    development.

    Raises:
        ConfigError: If neither source yields usable credentials
    """
    try:
        kubernetes.config.load_incluster_config()
        return
    except kubernetes.config.ConfigException:
        pass
    try:
        kubernetes.config.load_kube_config()
    except (kubernetes.config.ConfigException, OSError) as e:
        raise ConfigError(f"cannot load cluster credentials: {e}") from e


class ClusterApi(ABC):
    """Read-only view of the orchestration API used by the binder."""

    @abstractmethod
    def get_instance(self, namespace: str, name: str) -> WorkloadInstance:
        """
        Fetch a fresh pod snapshot.

        Raises:
            InstanceNotFound: If the pod does not exist
        """
        ...

    @abstractmethod
    def list_services(self, namespace: str, label_selector: str, limit: int) -> List[Service]:
        """Return services in namespace whose labels match label_selector."""
        ...


class KubeClusterApi(ClusterApi):
    def __init__(self, core_api: Optional[client.CoreV1Api] = None):
        self.core_api = core_api or client.CoreV1Api()

    def get_instance(self, namespace: str, name: str) -> WorkloadInstance:
        try:
            pod = self.core_api.read_namespaced_pod(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                raise InstanceNotFound(namespace, name) from e
            raise
        return WorkloadInstance.from_pod(pod)

    def list_services(self, namespace: str, label_selector: str, limit: int) -> List[Service]:
        services = self.core_api.list_namespaced_service(
            namespace=namespace,
            label_selector=label_selector,
            limit=limit,
        )
        return [Service.from_v1(svc) for svc in services.items]
