from __future__ import annotations

from dataclasses import dataclass

from .models import ChatMessage, DiagnosisResult


CONFIGURATION_MISSING = "configuration_missing"
TRANSPORT = "transport"
API_ERROR = "api_error"
CONTENT_BLOCKED = "content_blocked"
GENERATION_STOPPED = "generation_stopped"
EMPTY_RESPONSE = "empty_response"
MALFORMED_RESULT = "malformed_result"
RATE_LIMITED = "rate_limited"
UNKNOWN = "unknown"

# Matched case-insensitively anywhere in a failure message.
RATE_LIMIT_MARKERS = ("429", "quota", "too many requests")


class AssistantError(Exception):
    kind = UNKNOWN


class ConfigurationError(AssistantError):
    kind = CONFIGURATION_MISSING


class TransportError(AssistantError):
    kind = TRANSPORT


class ApiError(AssistantError):
    kind = API_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ContentBlockedError(AssistantError):
    kind = CONTENT_BLOCKED

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class GenerationStoppedError(AssistantError):
    kind = GENERATION_STOPPED

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason


class EmptyResponseError(AssistantError):
    kind = EMPTY_RESPONSE


class MalformedResultError(AssistantError):
    kind = MALFORMED_RESULT


def is_rate_limited(message: str | None) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)


def classify_failure(exc: BaseException) -> str:
    if is_rate_limited(str(exc)):
        return RATE_LIMITED
    return getattr(exc, "kind", UNKNOWN)


@dataclass(frozen=True)
class FailureCopy:
    blocked: str
    stopped: str
    empty: str

    def blocked_error(self, reason: str) -> ContentBlockedError:
        return ContentBlockedError(self.blocked.format(reason=reason), reason)

    def stopped_error(self, reason: str) -> GenerationStoppedError:
        return GenerationStoppedError(self.stopped.format(reason=reason), reason)

    def empty_error(self) -> EmptyResponseError:
        return EmptyResponseError(self.empty)


DIAGNOSIS_FAILURE_COPY = FailureCopy(
    blocked="Diagnosis blocked: {reason}",
    stopped="Diagnosis stopped: {reason}",
    empty="AI could not generate a diagnosis. Please try again with more details.",
)

CHAT_FAILURE_COPY = FailureCopy(
    blocked="AI blocked config: {reason}",
    stopped="AI generation stopped: {reason}",
    empty="AI returned an empty response without clear error details.",
)


RATE_LIMIT_DIAGNOSIS = DiagnosisResult(
    diagnosis="AI Analysis Temporarily Unavailable (Rate Limit)",
    recommendations=[
        "We are receiving too many requests.",
        "Please wait a moment and try again.",
        "Consult a doctor if symptoms persist.",
    ],
    severity="medium",
)

FAILED_DIAGNOSIS_RECOMMENDATIONS = (
    "Please check your internet connection.",
    "Verify your API Key configuration.",
    "Try again later.",
)

RATE_LIMIT_CHAT_TEXT = (
    "I'm currently receiving too many requests. Please try again in a few moments."
)


def diagnosis_fallback(exc: BaseException) -> DiagnosisResult:
    if classify_failure(exc) == RATE_LIMITED:
        return RATE_LIMIT_DIAGNOSIS
    return DiagnosisResult(
        diagnosis=f"Analysis Failed: {str(exc) or 'Unknown Error'}",
        recommendations=list(FAILED_DIAGNOSIS_RECOMMENDATIONS),
        severity="high",
    )


def chat_fallback(exc: BaseException, *, language: str | None = None) -> ChatMessage:
    if classify_failure(exc) == RATE_LIMITED:
        text = RATE_LIMIT_CHAT_TEXT
    else:
        text = f"Connection Error: {str(exc) or 'Unknown error occurred'}. Please check your internet or API key."
    return ChatMessage(text=text, sender="ai", language=language)
