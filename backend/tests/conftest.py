from __future__ import annotations

import sys
from pathlib import Path
from typing import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from healthmonitor_ai import GenerativeLanguageClient, HealthAssistant, Settings  # noqa: E402
from provider_utils import FakeProvider  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key-1234567890")


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest_asyncio.fixture
async def http_clients() -> AsyncIterator[list[httpx.AsyncClient]]:
    clients: list[httpx.AsyncClient] = []
    yield clients
    for client in clients:
        await client.aclose()


@pytest.fixture
def make_client(provider, http_clients) -> Callable[[Settings], GenerativeLanguageClient]:
    def _make(settings: Settings) -> GenerativeLanguageClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
        http_clients.append(http_client)
        return GenerativeLanguageClient(settings, http_client=http_client)

    return _make


@pytest.fixture
def assistant(settings, make_client) -> HealthAssistant:
    return HealthAssistant(settings, client=make_client(settings))
