from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from healthmonitor_ai import ChatAction, HealthAssistant, Settings, UserContext
from provider_utils import gemini_reply


@pytest.mark.asyncio
async def test_send_message_suggests_log_vitals_only(assistant, provider):
    reply = "Good idea! I think I should log vitals every morning is a great habit."
    provider.reply(gemini_reply(reply))

    message = await assistant.send_message("I think I should log vitals every morning")

    assert message.sender == "ai"
    assert message.text == reply
    assert message.actions == [ChatAction(label="Log Vitals", action="log_vitals")]
    assert message.timestamp.utcoffset() == timedelta(0)
    prompt = provider.last_json()["contents"][0]["parts"][0]["text"]
    assert prompt.endswith("User Question: I think I should log vitals every morning")


@pytest.mark.asyncio
async def test_send_message_without_keywords_has_no_actions(assistant, provider):
    provider.reply(gemini_reply("Drink water and rest well."))

    message = await assistant.send_message("Any tips for sleep?")

    assert message.actions is None


@pytest.mark.asyncio
async def test_send_message_builds_prompt_from_user_context(assistant, provider):
    provider.reply(gemini_reply("Your vitals look stable."))
    context = UserContext.model_validate(
        {
            "role": "caregiver",
            "userName": "Sam",
            "latestVitals": {"heart_rate": 72, "systolic_bp": 120, "diastolic_bp": None, "weight": 0},
            "language": "es",
        }
    )

    message = await assistant.send_message("How am I doing?", context)

    prompt = provider.last_json()["contents"][0]["parts"][0]["text"]
    assert "- User Name: Sam" in prompt
    assert "- User Role: caregiver" in prompt
    assert "User Vitals: Heart Rate 72 bpm, BP 120/N/A mmHg, Weight N/A kg." in prompt
    assert "- Preferred Language: es" in prompt
    assert message.language == "es"


@pytest.mark.asyncio
async def test_rate_limited_chat_returns_overload_message(assistant, provider):
    provider.reply({"error": {"message": "Too Many Requests"}}, status_code=429)

    message = await assistant.send_message("hello")

    assert message.sender == "ai"
    assert "too many requests" in message.text.lower()
    assert not message.text.startswith("Connection Error")
    assert message.actions is None


@pytest.mark.asyncio
async def test_blocked_chat_returns_connection_error_message(assistant, provider):
    provider.reply({"promptFeedback": {"blockReason": "OTHER"}})

    message = await assistant.send_message("hello")

    assert message.text == (
        "Connection Error: AI blocked config: OTHER. Please check your internet or API key."
    )


@pytest.mark.asyncio
async def test_failure_reply_never_carries_actions_from_error_text(assistant, provider):
    provider.reply({"error": {"message": "emergency maintenance"}}, status_code=503)

    message = await assistant.send_message("hello")

    assert message.text.startswith("Connection Error: emergency maintenance")
    assert message.actions is None


@pytest.mark.asyncio
async def test_missing_api_key_returns_message_instead_of_raising(make_client, provider):
    settings = Settings(api_key="")
    assistant = HealthAssistant(settings, client=make_client(settings))

    message = await assistant.send_message("hello")

    assert message.sender == "ai"
    assert message.text.startswith("AI Configuration Missing")
    assert provider.requests == []


@pytest.mark.asyncio
async def test_message_ids_are_unique(assistant, provider):
    provider.reply(gemini_reply("Hi there."))

    first = await assistant.send_message("hello")
    second = await assistant.send_message("hello again")

    assert first.id != second.id


@pytest.mark.asyncio
async def test_transport_failure_returns_connection_error_message(assistant, provider):
    provider.error = httpx.ConnectError("connection refused")

    message = await assistant.send_message("hello")

    assert message.sender == "ai"
    assert message.text.startswith("Connection Error: Network request failed")
    assert "connection refused" in message.text
    assert message.actions is None


@pytest.mark.asyncio
async def test_stopped_generation_returns_connection_error_message(assistant, provider):
    provider.reply({"candidates": [{"finishReason": "MAX_TOKENS"}]})

    message = await assistant.send_message("hello")

    assert message.text == (
        "Connection Error: AI generation stopped: MAX_TOKENS. Please check your internet or API key."
    )


@pytest.mark.asyncio
async def test_empty_envelope_returns_connection_error_message(assistant, provider):
    provider.reply({"candidates": []})

    message = await assistant.send_message("hello")

    assert message.text == (
        "Connection Error: AI returned an empty response without clear error details. "
        "Please check your internet or API key."
    )
