from __future__ import annotations

import asyncio

import httpx

from homepage_discovery.adapters.http_resilience import (
    BearerTokenAuth,
    ResilienceConfig,
    ResilientClient,
)


def test_bearer_token_is_fetched_for_every_request() -> None:
    tokens = iter(["first", "second"])
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["Authorization"])
        return httpx.Response(200, json={})

    async def scenario() -> None:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            auth=BearerTokenAuth(lambda: next(tokens)),
        ) as client:
            await client.get("https://kubernetes.test/api")
            await client.get("https://kubernetes.test/api")

    asyncio.run(scenario())

    assert seen == ["Bearer first", "Bearer second"]


def test_resilient_client_uses_token_provider() -> None:
    http = ResilientClient(
        ResilienceConfig(
            name="test",
            base_url="https://kubernetes.test",
            token_provider=lambda: "t0k3n",
        )
    )

    auth = http._client.auth  # noqa: SLF001  # type: ignore[reportPrivateUsage]

    assert isinstance(auth, BearerTokenAuth)

    asyncio.run(http.aclose())


def test_resilient_client_without_token_provider_has_no_auth() -> None:
    http = ResilientClient(ResilienceConfig(name="test", base_url="https://kubernetes.test"))

    assert http._client.auth is None  # noqa: SLF001  # type: ignore[reportPrivateUsage]

    asyncio.run(http.aclose())
