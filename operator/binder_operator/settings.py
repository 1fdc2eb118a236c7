"""
Operator configuration loaded from environment variables.

Defaults reproduce the production deployment: watch Pod events in the
"prod" namespace, bind on "Started", unbind on "Killing".
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

from binder.core.errors import ConfigError


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_keys(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return default
    keys = tuple(k.strip() for k in raw.split(",") if k.strip())
    if not keys:
        raise ConfigError(f"{name} must name at least one label key")
    return keys


@dataclass
class BinderConfig:
    watch_namespace: str = "prod"
    watch_kind: str = "Pod"
    start_reason: str = "Started"
    kill_reason: str = "Killing"
    selector_keys: Tuple[str, ...] = field(default=("env", "logic_group", "appcode"))
    service_list_limit: int = 10000
    poll_interval_seconds: int = 5
    ready_timeout_seconds: int = 3600
    settle_seconds: int = 10
    flow_workers: int = 32
    flow_queue_size: int = 1000
    unbind_workers: int = 8
    action_workers: int = 8
    dedup_window_seconds: int = 600
    strict_service_match: bool = False
    metrics_enabled: bool = False
    metrics_port: int = 8080

    @staticmethod
    def from_env() -> "BinderConfig":
        config = BinderConfig(
            watch_namespace=os.getenv("BINDER_WATCH_NAMESPACE", "prod"),
            watch_kind=os.getenv("BINDER_WATCH_KIND", "Pod"),
            start_reason=os.getenv("BINDER_START_REASON", "Started"),
            kill_reason=os.getenv("BINDER_KILL_REASON", "Killing"),
            selector_keys=_env_keys("BINDER_SELECTOR_KEYS", ("env", "logic_group", "appcode")),
            service_list_limit=_env_int("BINDER_SERVICE_LIST_LIMIT", 10000),
            poll_interval_seconds=_env_int("BINDER_POLL_INTERVAL_SECONDS", 5),
            ready_timeout_seconds=_env_int("BINDER_READY_TIMEOUT_SECONDS", 3600),
            settle_seconds=_env_int("BINDER_SETTLE_SECONDS", 10),
            flow_workers=_env_int("BINDER_FLOW_WORKERS", 32),
            flow_queue_size=_env_int("BINDER_FLOW_QUEUE_SIZE", 1000),
            unbind_workers=_env_int("BINDER_UNBIND_WORKERS", 8),
            action_workers=_env_int("BINDER_ACTION_WORKERS", 8),
            dedup_window_seconds=_env_int("BINDER_DEDUP_WINDOW_SECONDS", 600),
            strict_service_match=os.getenv("BINDER_STRICT_SERVICE_MATCH", "0") == "1",
            metrics_enabled=os.getenv("METRICS_ENABLED", "false").lower() == "true",
            metrics_port=_env_int("METRICS_PORT", 8080),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.poll_interval_seconds <= 0:
            raise ConfigError("poll interval must be positive")
        if self.ready_timeout_seconds < 0 or self.settle_seconds < 0:
            raise ConfigError("timeouts must not be negative")
        if min(self.flow_workers, self.unbind_workers, self.action_workers) <= 0:
            raise ConfigError("worker counts must be positive")
        if self.service_list_limit <= 0:
            raise ConfigError("service list limit must be positive")
