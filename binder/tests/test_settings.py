"""
Tests for environment configuration.
"""

import pytest

from binder.core.errors import ConfigError
from binder_operator.settings import BinderConfig


def test_defaults(monkeypatch):
    for key in ("BINDER_WATCH_NAMESPACE", "BINDER_SELECTOR_KEYS", "BINDER_POLL_INTERVAL_SECONDS", "METRICS_ENABLED"):
        monkeypatch.delenv(key, raising=False)

    config = BinderConfig.from_env()

    assert config.watch_namespace == "prod"
    assert config.watch_kind == "Pod"
    assert config.selector_keys == ("env", "logic_group", "appcode")
    assert config.service_list_limit == 10000
    assert config.poll_interval_seconds == 5
    assert config.ready_timeout_seconds == 3600
    assert config.settle_seconds == 10
    assert config.metrics_enabled is False


def test_overrides(monkeypatch):
    monkeypatch.setenv("BINDER_WATCH_NAMESPACE", "staging")
    monkeypatch.setenv("BINDER_SELECTOR_KEYS", "team, app")
    monkeypatch.setenv("BINDER_READY_TIMEOUT_SECONDS", "60")
    monkeypatch.setenv("BINDER_STRICT_SERVICE_MATCH", "1")
    monkeypatch.setenv("METRICS_ENABLED", "true")

    config = BinderConfig.from_env()

    assert config.watch_namespace == "staging"
    assert config.selector_keys == ("team", "app")
    assert config.ready_timeout_seconds == 60
    assert config.strict_service_match is True
    assert config.metrics_enabled is True


def test_bad_integer_is_config_error(monkeypatch):
    monkeypatch.setenv("BINDER_POLL_INTERVAL_SECONDS", "five")

    with pytest.raises(ConfigError):
        BinderConfig.from_env()


def test_non_positive_interval_rejected(monkeypatch):
    monkeypatch.setenv("BINDER_POLL_INTERVAL_SECONDS", "0")

    with pytest.raises(ConfigError):
        BinderConfig.from_env()


def test_unbind_workers(monkeypatch):
    monkeypatch.delenv("BINDER_UNBIND_WORKERS", raising=False)
    assert BinderConfig.from_env().unbind_workers == 8

    monkeypatch.setenv("BINDER_UNBIND_WORKERS", "2")
    assert BinderConfig.from_env().unbind_workers == 2

    monkeypatch.setenv("BINDER_UNBIND_WORKERS", "0")
    with pytest.raises(ConfigError):
        BinderConfig.from_env()
