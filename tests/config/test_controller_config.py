from __future__ import annotations

import pytest

from homepage_discovery.config import ConfigurationError, ControllerConfig, get_controller_config


def test_defaults_when_unset() -> None:
    assert get_controller_config() == ControllerConfig()


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOMEPAGE_NAMESPACE", "dash")
    monkeypatch.setenv("HOMEPAGE_CONFIGMAP", "dash-config")
    monkeypatch.setenv("HOMEPAGE_DEPLOYMENT", "dash-web")
    monkeypatch.setenv("DISCOVERY_NAMESPACE", "apps")
    monkeypatch.setenv("DISCOVERY_DEBOUNCE_SECONDS", "0.5")
    monkeypatch.setenv("DISCOVERY_RESYNC_SECONDS", "0")
    monkeypatch.setenv("DISCOVERY_WRITE_ATTEMPTS", "2")

    config = get_controller_config()

    assert config.homepage_namespace == "dash"
    assert config.homepage_configmap == "dash-config"
    assert config.homepage_deployment == "dash-web"
    assert config.watch_namespace == "apps"
    assert config.debounce_seconds == 0.5
    assert config.resync_seconds == 0.0
    assert config.write_attempts == 2


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOMEPAGE_NAMESPACE", "   ")
    monkeypatch.setenv("DISCOVERY_NAMESPACE", "")

    config = get_controller_config()

    assert config.homepage_namespace == "homepage"
    assert config.watch_namespace is None


@pytest.mark.parametrize(("value", "expected"), [("true", True), ("false", False), ("TRUE", False)])
def test_restart_flag_requires_literal_true(
    monkeypatch: pytest.MonkeyPatch, value: str, expected: bool
) -> None:
    monkeypatch.setenv("RESTART_HOMEPAGE", value)

    assert get_controller_config().restart_homepage is expected


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("DISCOVERY_DEBOUNCE_SECONDS", "soon"),
        ("DISCOVERY_RESYNC_SECONDS", "-1"),
        ("DISCOVERY_WRITE_ATTEMPTS", "0"),
        ("DISCOVERY_WRITE_ATTEMPTS", "1.5"),
    ],
)
def test_invalid_numbers_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_controller_config()
