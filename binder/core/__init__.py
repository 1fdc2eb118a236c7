"""
Core primitives shared by the operator and the CLI.

This module provides the cluster-free building blocks:
- LifecycleEvent: Parsed pod lifecycle event
- WorkloadInstance / Service / BindingTask: Snapshot value types
- Clock: Real and simulated time sources
- Errors: Binder exception taxonomy
"""

from .events import LifecycleEvent, parse_timestamp
from .models import WorkloadInstance, Service, BindingTask
from .clock import Clock, SystemClock, ManualClock
from .errors import (
    BinderError,
    EventParseError,
    InstanceNotFound,
    ResolutionError,
    ServiceNotFound,
    AmbiguousService,
    IncompleteSelector,
    ConfigError,
)

__all__ = [
    "LifecycleEvent",
    "parse_timestamp",
    "WorkloadInstance",
    "Service",
    "BindingTask",
    "Clock",
    "SystemClock",
    "ManualClock",
    "BinderError",
    "EventParseError",
    "InstanceNotFound",
    "ResolutionError",
    "ServiceNotFound",
    "AmbiguousService",
    "IncompleteSelector",
    "ConfigError",
]
