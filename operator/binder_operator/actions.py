"""
Bind/unbind actions.

These are the hooks where a pod address gets attached to or detached from
a service's upstream. Today they only record what would change.
"""

import logging

from binder.core.models import BindingTask

logger = logging.getLogger(__name__)


def mount_upstream(task: BindingTask) -> None:
    logger.info(
        "mount",
        extra={"pod": task.pod_name, "ip": task.address, "svc": task.service_name, "namespace": task.namespace},
    )


def unmount_upstream(task: BindingTask) -> None:
    logger.info(
        "unmount",
        extra={"pod": task.pod_name, "ip": task.address, "svc": task.service_name, "namespace": task.namespace},
    )
