"""Async client for the Antares oneM2M platform."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import AntaresSettings
from .decoder import DecodeFailure, DecodeResult, decode

logger = logging.getLogger(__name__)


class AntaresError(Exception):
    """Base error for platform communication failures."""


class AntaresHTTPError(AntaresError):
    """Raised when the platform answers with a non-success status."""

    def __init__(self, status_code: int, reason: str = ""):
        super().__init__(f"Antares API error: {status_code} {reason}".strip())
        self.status_code = status_code
        self.reason = reason


class AntaresResponseError(AntaresError):
    """Raised when the response envelope does not carry a content instance."""


def _headers(settings: AntaresSettings) -> dict[str, str]:
    return {
        "X-M2M-Origin": settings.api_key,
        "Content-Type": "application/json;ty=4",
        "Accept": "application/json",
    }


class AntaresClient:
    def __init__(self, settings: AntaresSettings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "AntaresClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        if self._client is None:
            raise AntaresError("client is not open; use 'async with AntaresClient(...)'")
        try:
            response = await self._client.get(url, params=params, headers=_headers(self.settings))
        except httpx.RequestError as exc:
            raise AntaresError(f"request to Antares failed: {exc}") from exc

        if response.status_code >= 300:
            raise AntaresHTTPError(response.status_code, response.reason_phrase)
        try:
            return response.json()
        except ValueError as exc:
            raise AntaresResponseError("Antares returned a non-JSON body") from exc

    async def fetch_latest_content(self) -> Any:
        """Return the raw ``m2m:cin.con`` value of the newest content instance."""

        url = self.settings.latest_url
        logger.info("Fetching latest content instance from %s", url)
        envelope = await self._get_json(url)
        cin = envelope.get("m2m:cin") if isinstance(envelope, dict) else None
        content = cin.get("con") if isinstance(cin, dict) else None
        if content in (None, ""):
            raise AntaresResponseError("Invalid response format - missing m2m:cin.con")
        return content

    async def fetch_latest(self) -> DecodeResult | DecodeFailure:
        return decode(await self.fetch_latest_content())

    async def fetch_history(self, limit: int = 100) -> list[DecodeResult]:
        """Decode up to *limit* recent instances, oldest first. Undecodable ones are skipped."""

        envelope = await self._get_json(self.settings.container_url, params={"rcn": 4, "lim": limit})
        cnt = envelope.get("m2m:cnt") if isinstance(envelope, dict) else None
        instances = (cnt or {}).get("m2m:cin") or []

        results: list[DecodeResult] = []
        for instance in instances:
            content = instance.get("con") if isinstance(instance, dict) else None
            outcome = decode(content)
            if isinstance(outcome, DecodeFailure):
                logger.debug("Skipping undecodable instance: %s", outcome.detail)
                continue
            results.append(outcome)
        # Platform lists newest first.
        results.reverse()
        return results
