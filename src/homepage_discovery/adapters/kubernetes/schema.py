"""Pydantic models describing the Kubernetes API payloads we read."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty(value: object) -> object:
    return {} if value is None else value


class KubernetesBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMeta(KubernetesBaseModel):
    name: str
    namespace: str = ""
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    annotations: dict[str, str] = Field(default_factory=dict)

    _normalize_annotations = field_validator("annotations", mode="before")(_none_to_empty)


class ListMeta(KubernetesBaseModel):
    resource_version: str | None = Field(default=None, alias="resourceVersion")


class ServicePayload(KubernetesBaseModel):
    metadata: ObjectMeta


class ServiceListPayload(KubernetesBaseModel):
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: list[ServicePayload] = Field(default_factory=list)


class ConfigMapPayload(KubernetesBaseModel):
    metadata: ObjectMeta
    data: dict[str, str] = Field(default_factory=dict)

    _normalize_data = field_validator("data", mode="before")(_none_to_empty)


class StatusPayload(KubernetesBaseModel):
    kind: str = "Status"
    status: str | None = None
    message: str = ""
    reason: str = ""
    code: int | None = None


WatchEventType = Literal["ADDED", "MODIFIED", "DELETED", "BOOKMARK", "ERROR"]


class WatchEvent(KubernetesBaseModel):
    type: WatchEventType
    object: dict[str, Any]

    def status(self) -> StatusPayload:
        return StatusPayload.model_validate(self.object)

    def resource_version(self) -> str | None:
        metadata = self.object.get("metadata")
        if isinstance(metadata, dict):
            value = metadata.get("resourceVersion")
            return str(value) if value is not None else None
        return None
