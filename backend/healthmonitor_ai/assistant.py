from __future__ import annotations

from functools import lru_cache

from loguru import logger

from .actions import infer_actions
from .config import MISSING_KEY_MESSAGE, Settings, load_settings
from .dispatcher import GenerativeLanguageClient
from .errors import (
    CHAT_FAILURE_COPY,
    DIAGNOSIS_FAILURE_COPY,
    ConfigurationError,
    chat_fallback,
    diagnosis_fallback,
)
from .extraction import extract_generated_text, require_text
from .models import ChatMessage, DiagnosisResult, UserContext
from .parsing import parse_diagnosis
from .prompts import build_chat_request, build_diagnosis_request


class HealthAssistant:
    """Symptom analysis and health chat backed by one Gemini call each.

    ``analyze_symptoms`` raises ``ConfigurationError`` when no API key is set;
    every other failure, on both paths, is folded into a valid result.
    """

    def __init__(self, settings: Settings, *, client: GenerativeLanguageClient | None = None) -> None:
        self.settings = settings
        self.client = client or GenerativeLanguageClient(settings)

    async def analyze_symptoms(self, symptoms: str, image_base64: str | None = None) -> DiagnosisResult:
        if not self.settings.configured:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        logger.info("[AI] Requesting analysis for: {}", symptoms or "Image only")
        request = build_diagnosis_request(symptoms, image_base64)
        try:
            envelope = await self.client.generate_content(request)
            text = require_text(extract_generated_text(envelope), DIAGNOSIS_FAILURE_COPY)
            return parse_diagnosis(text)
        except Exception as exc:
            logger.exception("[Gemini] Analysis failed: {}", exc)
            return diagnosis_fallback(exc)

    async def send_message(self, text: str, context: UserContext | None = None) -> ChatMessage:
        language = context.language if context is not None else None
        if not self.settings.configured:
            logger.warning("[AI] Chat requested without configuration")
            return ChatMessage(text=MISSING_KEY_MESSAGE, sender="ai", language=language)

        request = build_chat_request(text, context)
        try:
            envelope = await self.client.generate_content(request)
            reply = require_text(extract_generated_text(envelope), CHAT_FAILURE_COPY)
        except Exception as exc:
            logger.exception("[Gemini] Chat failed: {}", exc)
            return chat_fallback(exc, language=language)

        return ChatMessage(text=reply, sender="ai", language=language, actions=infer_actions(reply))


@lru_cache(maxsize=1)
def get_default_assistant() -> HealthAssistant:
    return HealthAssistant(load_settings())


async def analyze_symptoms(symptoms: str, image_base64: str | None = None) -> DiagnosisResult:
    return await get_default_assistant().analyze_symptoms(symptoms, image_base64)


async def send_message(text: str, context: UserContext | None = None) -> ChatMessage:
    return await get_default_assistant().send_message(text, context)
