"""AUR RPC search client."""

from __future__ import annotations

from typing import Any, Sequence

import httpx
from pydantic import ValidationError

from aursearch.config import AurSettings
from aursearch.domain.models import PackageRecord, SearchMode
from aursearch.logging import logger
from aursearch.services.exceptions import ApiError, UpstreamError
from aursearch.utils.retry import retry_async

RPC_VERSION = "5"
RPC_PATH = "/rpc/"


class AurClient:
    """Issue search lookups against the AUR RPC interface.

    Every call goes to the network; nothing is cached between calls so that
    version bumps show up immediately.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: AurSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or AurSettings()

    @property
    def rpc_url(self) -> str:
        return f"{str(self._settings.base_url).rstrip('/')}{RPC_PATH}"

    async def search(
        self,
        term: str,
        *,
        by: SearchMode = "name",
        timeout: float | None = None,
    ) -> Sequence[PackageRecord]:
        term = (term or "").strip()
        if not term:
            return []

        params = {"v": RPC_VERSION, "type": "search", "by": by, "arg": term}
        request_timeout = timeout if timeout is not None else self._settings.request_timeout_seconds

        async def _request() -> httpx.Response:
            response = await self._client.get(
                self.rpc_url,
                params=params,
                timeout=request_timeout,
            )
            if response.status_code >= 500:
                response.raise_for_status()
            return response

        try:
            response = await retry_async(
                _request,
                max_attempts=self._settings.max_attempts,
                base_delay=self._settings.retry_base_delay,
                multiplier=self._settings.retry_multiplier,
                retry_on=(httpx.RequestError, httpx.HTTPStatusError),
                logger=logger,
                operation_name="aur_search_request",
            )
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            raise UpstreamError(f"AUR request failed ({status_code})") from exc
        except httpx.RequestError as exc:
            raise UpstreamError(f"AUR request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ApiError(self._client_error_detail(response))

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("AUR returned a non-JSON response") from exc
        if not isinstance(data, dict):
            raise UpstreamError("AUR returned an unexpected response envelope")

        return self._parse_envelope(data, term)

    def _parse_envelope(self, data: dict[str, Any], term: str) -> list[PackageRecord]:
        if data.get("type") == "error":
            raise ApiError(str(data.get("error") or "AUR reported an error"))

        results = data.get("results") or []
        if data.get("resultcount") == 0 or not results:
            return []
        if not isinstance(results, list):
            raise UpstreamError("AUR results field is not a list")

        records: list[PackageRecord] = []
        for item in results:
            if len(records) >= self._settings.max_results:
                break
            try:
                records.append(PackageRecord.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "aur_package_skipped",
                    term=term,
                    error=str(exc),
                )
        return records

    @staticmethod
    def _client_error_detail(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return f"HTTP {response.status_code}"


__all__ = ["AurClient"]
