"""
Tests for snapshot construction from API objects.
"""

from kubernetes import client

from binder.core.models import Service, WorkloadInstance


def _v1_pod(conditions, pod_ip="10.0.0.9"):
    return client.V1Pod(
        metadata=client.V1ObjectMeta(
            name="api-7",
            namespace="prod",
            uid="u-7",
            labels={"env": "p", "logic_group": "g", "appcode": "a", "pod-template-hash": "abc"},
        ),
        status=client.V1PodStatus(pod_ip=pod_ip, conditions=conditions),
    )


def test_pod_ready_condition_true():
    pod = _v1_pod([
        client.V1PodCondition(type="PodScheduled", status="True"),
        client.V1PodCondition(type="Ready", status="True"),
    ])

    instance = WorkloadInstance.from_pod(pod)

    assert instance.ready is True
    assert instance.address == "10.0.0.9"
    assert instance.uid == "u-7"
    assert instance.labels["appcode"] == "a"


def test_pod_not_ready_without_ready_condition():
    assert WorkloadInstance.from_pod(_v1_pod(None, pod_ip=None)).ready is False
    assert WorkloadInstance.from_pod(_v1_pod([client.V1PodCondition(type="Ready", status="False")])).ready is False


def test_snapshot_is_detached_from_api_object():
    pod = _v1_pod([client.V1PodCondition(type="Ready", status="True")])
    instance = WorkloadInstance.from_pod(pod)

    pod.metadata.labels["env"] = "changed"

    assert instance.labels["env"] == "p"


def test_service_from_v1():
    svc = client.V1Service(
        metadata=client.V1ObjectMeta(name="api-svc", namespace="prod", labels={"env": "p"}),
        spec=client.V1ServiceSpec(selector={"app": "api"}),
    )

    service = Service.from_v1(svc)

    assert service.name == "api-svc"
    assert service.labels == {"env": "p"}
    assert service.selector == {"app": "api"}
