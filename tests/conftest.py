"""Shared pytest fixtures for the inline search pipeline."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from aursearch.config import AurSettings
from aursearch.domain.models import SearchQuery


def package_payload(name: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "ID": abs(hash(name)) % 100_000,
        "Name": name,
        "PackageBaseID": 1,
        "PackageBase": name,
        "Version": "1.0-1",
        "Description": f"{name} description",
        "URL": f"https://example.org/{name}",
        "NumVotes": 10,
        "Popularity": 0.5,
        "OutOfDate": None,
        "Maintainer": "alice",
        "FirstSubmitted": 1_500_000_000,
        "LastModified": 1_600_000_000,
    }
    payload.update(overrides)
    return payload


def search_envelope(*packages: dict[str, Any]) -> dict[str, Any]:
    return {
        "version": 5,
        "type": "search",
        "resultcount": len(packages),
        "results": list(packages),
    }


@pytest.fixture
def aur_settings() -> AurSettings:
    return AurSettings(retry_base_delay=0)


@pytest.fixture
def mock_http() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient answering through ``handler``; requests are recorded."""

    def factory(handler, requests: list[httpx.Request] | None = None) -> httpx.AsyncClient:
        async def _record(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            return await handler(request)

        return httpx.AsyncClient(transport=httpx.MockTransport(_record))

    return factory


@pytest.fixture
def make_query() -> Callable[..., SearchQuery]:
    def factory(
        text: str,
        *,
        requester_id: int = 42,
        received_at: float = 0.0,
        offset: str | int | None = None,
        language_code: str | None = "en",
    ) -> SearchQuery:
        return SearchQuery.parse(
            text,
            requester_id=requester_id,
            received_at=received_at,
            offset=offset,
            language_code=language_code,
        )

    return factory
