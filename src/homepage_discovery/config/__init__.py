"""Application configuration helpers."""

from __future__ import annotations

from .controller import ControllerConfig, get_controller_config
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .kubernetes import ClusterConfig, get_cluster_config, load_kubeconfig
from .logging import configure_logging

__all__ = [
    "ClusterConfig",
    "ConfigurationError",
    "ControllerConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "configure_logging",
    "get_cluster_config",
    "get_controller_config",
    "load_kubeconfig",
]
