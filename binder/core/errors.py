"""
Exception types for the pod upstream binder.
"""

from typing import Iterable


class BinderError(Exception):
    """Base class for binder errors."""
    pass


class EventParseError(BinderError):
    """Raised when a delivered object is not a usable lifecycle event."""
    pass


class InstanceNotFound(BinderError):
    """Raised when a pod no longer exists in the cluster."""

    def __init__(self, namespace: str, name: str):
        super().__init__(f"pod {namespace}/{name} not found")
        self.namespace = namespace
        self.name = name


class ResolutionError(BinderError):
    """Raised when no single service can be resolved for a pod."""
    pass


class ServiceNotFound(ResolutionError):
    def __init__(self, instance_name: str):
        super().__init__(f"pod: {instance_name}, not found service")
        self.instance_name = instance_name


class AmbiguousService(ResolutionError):
    def __init__(self, instance_name: str, candidates: Iterable[str]):
        self.instance_name = instance_name
        self.candidates = sorted(candidates)
        super().__init__(
            f"pod: {instance_name}, matched {len(self.candidates)} services: {', '.join(self.candidates)}"
        )


class IncompleteSelector(ResolutionError):
    """Raised when a pod lacks one of the labels used to select its service."""

    def __init__(self, instance_name: str, missing_keys: Iterable[str]):
        self.instance_name = instance_name
        self.missing_keys = sorted(missing_keys)
        super().__init__(
            f"pod: {instance_name}, missing selector labels: {', '.join(self.missing_keys)}"
        )


class ConfigError(BinderError):
    """Raised when configuration or cluster credentials cannot be loaded."""
    pass
