from __future__ import annotations

import httpx
import pytest

from healthmonitor_ai import ApiError, Settings, TransportError
from provider_utils import gemini_reply


@pytest.mark.asyncio
async def test_generate_content_posts_payload_with_key(settings, make_client, provider):
    provider.reply(gemini_reply("hello"))
    client = make_client(settings)

    envelope = await client.generate_content({"contents": [{"parts": [{"text": "hi"}]}]})

    assert envelope["candidates"][0]["content"]["parts"][0]["text"] == "hello"
    request = provider.requests[-1]
    assert str(request.url).startswith(
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent?"
    )
    assert request.url.params["key"] == settings.api_key
    assert request.headers["content-type"] == "application/json"
    assert provider.last_json() == {"contents": [{"parts": [{"text": "hi"}]}]}


@pytest.mark.asyncio
async def test_error_status_surfaces_provider_message(settings, make_client, provider):
    provider.reply({"error": {"code": 400, "message": "API key not valid."}}, status_code=400)

    with pytest.raises(ApiError, match="^API key not valid.$") as excinfo:
        await make_client(settings).generate_content({})
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_error_status_with_non_json_body_uses_generic_message(settings, make_client, provider):
    provider.reply("<html>Bad Gateway</html>", status_code=502)

    with pytest.raises(ApiError, match="^API Error: 502$"):
        await make_client(settings).generate_content({})


@pytest.mark.asyncio
async def test_success_status_with_non_json_body_is_rejected(settings, make_client, provider):
    provider.reply("definitely not json", status_code=200)

    with pytest.raises(ApiError, match="unreadable response body"):
        await make_client(settings).generate_content({})


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error(settings, make_client, provider):
    provider.error = httpx.ConnectTimeout("timed out")

    with pytest.raises(TransportError, match="timed out"):
        await make_client(settings).generate_content({})
    assert len(provider.requests) == 1


@pytest.mark.asyncio
async def test_list_models_returns_names(make_client, provider):
    settings = Settings(api_key="k", api_base="https://example.test/", model="gemini-test")
    provider.reply({"models": [{"name": "models/gemini-test"}, {"displayName": "nameless"}, {"name": "models/other"}]})

    names = await make_client(settings).list_models()

    assert names == ["models/gemini-test", "models/other"]
    request = provider.requests[-1]
    assert request.method == "GET"
    assert str(request.url) == "https://example.test/v1beta/models?key=k"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [301, 302])
async def test_non_success_status_without_error_body_raises(settings, make_client, provider, status_code):
    provider.reply({}, status_code=status_code)

    with pytest.raises(ApiError, match=f"^API Error: {status_code}$") as excinfo:
        await make_client(settings).generate_content({})
    assert excinfo.value.status_code == status_code
