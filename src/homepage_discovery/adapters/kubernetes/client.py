"""Minimal async client for the Kubernetes REST API."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ValidationError

from homepage_discovery.adapters.http_resilience import ResilientClient

from .schema import ConfigMapPayload, ServiceListPayload, StatusPayload, WatchEvent

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Mapping
    from types import TracebackType

    from homepage_discovery.config import ClusterConfig, ResilienceConfig

log = getLogger(__name__)

MERGE_PATCH = "application/merge-patch+json"
STRATEGIC_MERGE_PATCH = "application/strategic-merge-patch+json"
DEFAULT_WATCH_TIMEOUT_SECONDS = 300


class KubernetesAPIError(RuntimeError):
    """Raised when the API server rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None, reason: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason

    @property
    def is_conflict(self) -> bool:
        return self.status_code == httpx.codes.CONFLICT

    @property
    def is_gone(self) -> bool:
        return self.status_code == httpx.codes.GONE


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _services_path(namespace: str | None) -> str:
    return f"/api/v1/namespaces/{namespace}/services" if namespace else "/api/v1/services"


class KubernetesClient:
    """Typed wrappers for the handful of endpoints the controller calls."""

    def __init__(self, http: ResilientClient) -> None:
        self._http = http

    @classmethod
    def from_cluster_config(
        cls,
        cluster: ClusterConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
    ) -> KubernetesClient:
        return cls(client_factory(cluster.resilience()))

    async def __aenter__(self) -> KubernetesClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_services(self, *, namespace: str | None = None) -> ServiceListPayload:
        payload = await self._request("GET", _services_path(namespace))
        return _validate(ServiceListPayload, payload, "service list")

    async def watch_services(
        self,
        *,
        namespace: str | None = None,
        resource_version: str | None = None,
        timeout_seconds: int = DEFAULT_WATCH_TIMEOUT_SECONDS,
    ) -> AsyncIterator[WatchEvent]:
        """Yield watch events until the server closes the stream."""

        params: dict[str, str | int] = {
            "watch": 1,
            "allowWatchBookmarks": "true",
            "timeoutSeconds": timeout_seconds,
        }
        if resource_version:
            params["resourceVersion"] = resource_version
        timeout = httpx.Timeout(10.0, read=timeout_seconds + 30.0)

        try:
            async with self._http.stream(
                "GET", _services_path(namespace), params=params, timeout=timeout
            ) as response:
                if response.is_error:
                    await response.aread()
                    raise _api_error(response)
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    try:
                        yield WatchEvent.model_validate_json(line)
                    except ValidationError as exc:
                        raise KubernetesAPIError(f"Unexpected watch event: {line[:200]}") from exc
        except httpx.HTTPError as exc:
            raise KubernetesAPIError(f"Watch on services failed: {exc}") from exc

    async def get_configmap(self, *, namespace: str, name: str) -> ConfigMapPayload:
        payload = await self._request("GET", f"/api/v1/namespaces/{namespace}/configmaps/{name}")
        return _validate(ConfigMapPayload, payload, "ConfigMap")

    async def patch_configmap_data(
        self,
        *,
        namespace: str,
        name: str,
        data: Mapping[str, str],
        resource_version: str | None = None,
    ) -> ConfigMapPayload:
        """Merge ``data`` into the ConfigMap.

        With ``resource_version`` the server rejects the patch with 409 when the
        object changed since it was read.
        """

        body: dict[str, Any] = {"data": dict(data)}
        if resource_version is not None:
            body["metadata"] = {"resourceVersion": resource_version}
        payload = await self._request(
            "PATCH",
            f"/api/v1/namespaces/{namespace}/configmaps/{name}",
            body=body,
            content_type=MERGE_PATCH,
        )
        return _validate(ConfigMapPayload, payload, "ConfigMap")

    async def patch_deployment(
        self,
        *,
        namespace: str,
        name: str,
        patch: Mapping[str, Any],
    ) -> None:
        await self._request(
            "PATCH",
            f"/apis/apps/v1/namespaces/{namespace}/deployments/{name}",
            body=patch,
            content_type=STRATEGIC_MERGE_PATCH,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Mapping[str, Any] | None = None,
        content_type: str | None = None,
    ) -> dict[str, Any]:
        headers = {"Content-Type": content_type} if content_type else None
        content = json.dumps(body).encode() if body is not None else None
        try:
            response = await self._http.request(method, path, content=content, headers=headers)
        except httpx.HTTPError as exc:
            raise KubernetesAPIError(f"{method} {path} failed: {exc}") from exc

        if response.is_error:
            raise _api_error(response)
        try:
            payload = response.json()
        except ValueError as exc:
            raise KubernetesAPIError(
                f"Non-JSON response for {method} {path}: {response.text[:200]}",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise KubernetesAPIError(f"Unexpected response payload for {method} {path}")
        return payload


def _validate[TModel: BaseModel](model: type[TModel], payload: object, what: str) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise KubernetesAPIError(f"Unexpected {what} payload: {exc}") from exc


def _api_error(response: httpx.Response) -> KubernetesAPIError:
    try:
        status = StatusPayload.model_validate(response.json())
    except (ValueError, ValidationError):
        status = StatusPayload(message=response.text)
    message = status.message or response.text
    log.debug("Kubernetes API error %s: %s", response.status_code, message)
    return KubernetesAPIError(
        f"{response.request.method} {response.request.url.path} returned "
        f"{response.status_code}: {message}",
        status_code=response.status_code,
        reason=status.reason,
    )
