"""
Action dispatcher.

Turns (pod, service) into a BindingTask and hands it to the bind or unbind
action on an executor, so the calling flow never waits for the action.
"""

import logging
from concurrent.futures import Executor, Future
from typing import Any, Callable, Dict, Mapping, Optional

from binder.core.models import BindingTask, Service, WorkloadInstance
from .actions import mount_upstream, unmount_upstream
from .metrics import track_dispatch

logger = logging.getLogger(__name__)

BIND = "bind"
UNBIND = "unbind"

Action = Callable[[BindingTask], Any]

DEFAULT_ACTIONS: Dict[str, Action] = {
    BIND: mount_upstream,
    UNBIND: unmount_upstream,
}


class ActionDispatcher:
    def __init__(self, executor: Executor, actions: Optional[Mapping[str, Action]] = None):
        self.executor = executor
        self.actions = dict(actions if actions is not None else DEFAULT_ACTIONS)

    def dispatch(self, action: str, instance: WorkloadInstance, service: Service) -> Optional[Future]:
        """
        Submit action for instance/service and return its Future.

        The Future is only for observation: the outcome is logged and
        counted by a done-callback, and nothing is retried. Returns None when
        the pod has no address to bind.

        Raises:
            ValueError: If action is not a registered action name
        """
        fn = self.actions.get(action)
        if fn is None:
            raise ValueError(f"unknown action: {action}")

        if not instance.address:
            logger.warning(
                f"pod {instance.namespace}/{instance.name} has no address, skipping {action}",
                extra={"pod": instance.name, "svc": service.name},
            )
            track_dispatch(action, "skipped")
            return None

        task = BindingTask(
            address=instance.address,
            service_name=service.name,
            pod_name=instance.name,
            namespace=instance.namespace,
        )
        logger.info(
            "found related svc",
            extra={"pod": instance.name, "ip": task.address, "svc": task.service_name, "action": action},
        )
        future = self.executor.submit(fn, task)
        future.add_done_callback(lambda f: self._report(action, task, f))
        return future

    def _report(self, action: str, task: BindingTask, future: Future) -> None:
        if future.cancelled():
            track_dispatch(action, "cancelled")
            return
        error = future.exception()
        if error is None:
            track_dispatch(action, "success")
            logger.debug(f"{action} {task.pod_name} -> {task.service_name} done")
            return
        track_dispatch(action, "failure")
        logger.error(
            f"{action} {task.pod_name} -> {task.service_name} failed: {error}",
            extra={"pod": task.pod_name, "ip": task.address, "svc": task.service_name, "action": action},
        )
