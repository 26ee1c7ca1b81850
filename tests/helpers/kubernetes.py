"""Helpers for exercising the Kubernetes adapter against a mock transport."""

from __future__ import annotations

from collections.abc import Callable

import httpx

from homepage_discovery.adapters.http_resilience import ResilienceConfig, ResilientClient
from homepage_discovery.adapters.kubernetes import KubernetesClient

type Handler = Callable[[httpx.Request], httpx.Response]

BASE_URL = "https://kubernetes.test"


def make_kubernetes_client(handler: Handler) -> KubernetesClient:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    http = ResilientClient(ResilienceConfig(name="kubernetes-test", base_url=BASE_URL))
    http._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        base_url=BASE_URL,
        transport=httpx.MockTransport(async_handler),
    )
    return KubernetesClient(http)


def service_payload(
    name: str,
    *,
    namespace: str = "default",
    annotations: dict[str, str] | None = None,
) -> dict[str, object]:
    return {
        "kind": "Service",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": "100",
            "annotations": annotations,
        },
        "spec": {"ports": [{"port": 80}]},
    }
