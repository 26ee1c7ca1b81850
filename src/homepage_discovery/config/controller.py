"""Controller configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import get_env, get_env_flag, get_env_float, get_env_int, get_env_optional

DEFAULT_HOMEPAGE_NAMESPACE = "homepage"
DEFAULT_HOMEPAGE_CONFIGMAP = "homepage"
DEFAULT_HOMEPAGE_DEPLOYMENT = "homepage"
DEFAULT_DEBOUNCE_SECONDS = 2.0
DEFAULT_RESYNC_SECONDS = 30.0
DEFAULT_WRITE_ATTEMPTS = 5


@dataclass(frozen=True, slots=True)
class ControllerConfig:
    """Where the dashboard lives and how the reconcile loop is paced."""

    homepage_namespace: str = DEFAULT_HOMEPAGE_NAMESPACE
    homepage_configmap: str = DEFAULT_HOMEPAGE_CONFIGMAP
    homepage_deployment: str = DEFAULT_HOMEPAGE_DEPLOYMENT
    restart_homepage: bool = True
    watch_namespace: str | None = None
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    resync_seconds: float = DEFAULT_RESYNC_SECONDS
    write_attempts: int = DEFAULT_WRITE_ATTEMPTS


def get_controller_config() -> ControllerConfig:
    return ControllerConfig(
        homepage_namespace=get_env("HOMEPAGE_NAMESPACE", DEFAULT_HOMEPAGE_NAMESPACE),
        homepage_configmap=get_env("HOMEPAGE_CONFIGMAP", DEFAULT_HOMEPAGE_CONFIGMAP),
        homepage_deployment=get_env("HOMEPAGE_DEPLOYMENT", DEFAULT_HOMEPAGE_DEPLOYMENT),
        restart_homepage=get_env_flag("RESTART_HOMEPAGE", default=True),
        watch_namespace=get_env_optional("DISCOVERY_NAMESPACE"),
        debounce_seconds=get_env_float("DISCOVERY_DEBOUNCE_SECONDS", DEFAULT_DEBOUNCE_SECONDS),
        resync_seconds=get_env_float("DISCOVERY_RESYNC_SECONDS", DEFAULT_RESYNC_SECONDS),
        write_attempts=get_env_int("DISCOVERY_WRITE_ATTEMPTS", DEFAULT_WRITE_ATTEMPTS, minimum=1),
    )
