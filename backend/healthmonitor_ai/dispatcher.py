from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from loguru import logger

from .config import Settings
from .errors import ApiError, TransportError


def provider_error_message(payload: Any, status_code: int) -> str:
    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict):
            msg = err.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
    return f"API Error: {status_code}"


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class GenerativeLanguageClient:
    """Single-shot client for the Gemini REST API.

    Every call is one request with no retry. When ``http_client`` is given it is
    reused and left open; otherwise a client is opened and closed per call.
    """

    def __init__(self, settings: Settings, *, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._http_client = http_client

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        kwargs: dict[str, Any] = {}
        if self.settings.timeout_seconds is not None:
            kwargs["timeout"] = httpx.Timeout(self.settings.timeout_seconds)
        async with httpx.AsyncClient(**kwargs) as client:
            yield client

    async def _send(self, method: str, url: str, *, json: dict[str, Any] | None = None) -> dict[str, Any]:
        params = {"key": self.settings.api_key}
        try:
            async with self._client() as client:
                response = await client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            raise TransportError(f"Network request failed: {exc}") from exc

        payload = _decode_json(response)
        if not response.is_success:
            logger.error("[Gemini] API error response ({}): {}", response.status_code, payload)
            raise ApiError(provider_error_message(payload, response.status_code), response.status_code)
        if not isinstance(payload, dict):
            raise ApiError("Provider returned an unreadable response body.", response.status_code)
        return payload

    async def generate_content(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._send("POST", self.settings.generate_content_url, json=payload)

    async def list_models(self) -> list[str]:
        payload = await self._send("GET", self.settings.models_url)
        models = payload.get("models")
        if not isinstance(models, list):
            return []
        return [str(item["name"]) for item in models if isinstance(item, dict) and item.get("name")]
