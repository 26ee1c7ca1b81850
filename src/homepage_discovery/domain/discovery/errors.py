"""Failure taxonomy for a reconcile run."""

from __future__ import annotations


class DiscoveryError(RuntimeError):
    """Base class for errors that abandon a reconcile run."""


class MalformedDocumentError(DiscoveryError):
    """Raised when a persisted dashboard document does not have the expected shape."""

    def __init__(self, message: str, *, document: str) -> None:
        super().__init__(f"{document}: {message}")
        self.document = document


class WorkloadSourceError(DiscoveryError):
    """Raised when the current workloads cannot be listed."""


class DocumentStoreError(DiscoveryError):
    """Raised when the dashboard documents cannot be read or written."""


class DocumentConflictError(DocumentStoreError):
    """Raised when a write lost an optimistic-concurrency race."""


class RolloutError(DiscoveryError):
    """Raised when the dashboard rollout could not be triggered."""
