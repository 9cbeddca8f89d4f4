from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from loguru import logger
from pydantic import ValidationError

from .errors import FailureCopy
from .models import ProviderEnvelope


@dataclass(frozen=True)
class GeneratedText:
    text: str


@dataclass(frozen=True)
class Blocked:
    reason: str


@dataclass(frozen=True)
class Stopped:
    reason: str


@dataclass(frozen=True)
class Empty:
    pass


Extraction = Union[GeneratedText, Blocked, Stopped, Empty]


def parse_envelope(payload: dict[str, Any] | ProviderEnvelope) -> ProviderEnvelope:
    if isinstance(payload, ProviderEnvelope):
        return payload
    try:
        return ProviderEnvelope.model_validate(payload)
    except ValidationError as exc:
        logger.warning("[Gemini] Unexpected response shape: {}", exc)
        return ProviderEnvelope()


def extract_generated_text(payload: dict[str, Any] | ProviderEnvelope) -> Extraction:
    envelope = parse_envelope(payload)
    first = envelope.candidates[0] if envelope.candidates else None
    if first is not None and first.content is not None and first.content.parts:
        text = first.content.parts[0].text
        if text:
            return GeneratedText(text)

    finish_reason = first.finishReason if first is not None else None
    logger.error(
        "[Gemini] No content generated. finishReason={} safetyRatings={} promptFeedback={}",
        finish_reason,
        first.safetyRatings if first is not None else None,
        envelope.promptFeedback,
    )
    if envelope.promptFeedback is not None and envelope.promptFeedback.blockReason:
        return Blocked(envelope.promptFeedback.blockReason)
    if finish_reason:
        return Stopped(finish_reason)
    return Empty()


def require_text(extraction: Extraction, copy: FailureCopy) -> str:
    """Return the generated text or raise the path-specific failure for the variant."""
    if isinstance(extraction, GeneratedText):
        return extraction.text
    if isinstance(extraction, Blocked):
        raise copy.blocked_error(extraction.reason)
    if isinstance(extraction, Stopped):
        raise copy.stopped_error(extraction.reason)
    raise copy.empty_error()
