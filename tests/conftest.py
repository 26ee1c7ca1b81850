from __future__ import annotations

import pytest

CONTROLLER_ENV_VARS = (
    "HOMEPAGE_NAMESPACE",
    "HOMEPAGE_CONFIGMAP",
    "HOMEPAGE_DEPLOYMENT",
    "RESTART_HOMEPAGE",
    "DISCOVERY_NAMESPACE",
    "DISCOVERY_DEBOUNCE_SECONDS",
    "DISCOVERY_RESYNC_SECONDS",
    "DISCOVERY_WRITE_ATTEMPTS",
    "KUBERNETES_SERVICE_HOST",
    "KUBERNETES_SERVICE_PORT",
    "KUBECONFIG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in CONTROLLER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
