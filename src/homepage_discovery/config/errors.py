"""Errors raised while loading controller settings and cluster credentials."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when an environment variable, kubeconfig or certificate is invalid.

    The CLI exits with status 2 on this error.
    """


class MissingConfigurationError(ConfigurationError):
    """Raised when no cluster credentials or required kubeconfig entries are found."""
