from .actions import infer_actions
from .assistant import HealthAssistant, analyze_symptoms, get_default_assistant, send_message
from .config import Settings, load_settings
from .dispatcher import GenerativeLanguageClient
from .errors import (
    ApiError,
    AssistantError,
    ConfigurationError,
    ContentBlockedError,
    EmptyResponseError,
    GenerationStoppedError,
    MalformedResultError,
    TransportError,
    classify_failure,
    is_rate_limited,
)
from .extraction import Blocked, Empty, GeneratedText, Stopped, extract_generated_text
from .models import ChatAction, ChatMessage, DiagnosisResult, UserContext, Vitals
from .parsing import parse_diagnosis

__all__ = [
    "ApiError",
    "AssistantError",
    "Blocked",
    "ChatAction",
    "ChatMessage",
    "ConfigurationError",
    "ContentBlockedError",
    "DiagnosisResult",
    "Empty",
    "EmptyResponseError",
    "GeneratedText",
    "GenerationStoppedError",
    "GenerativeLanguageClient",
    "HealthAssistant",
    "MalformedResultError",
    "Settings",
    "Stopped",
    "TransportError",
    "UserContext",
    "Vitals",
    "analyze_symptoms",
    "classify_failure",
    "extract_generated_text",
    "get_default_assistant",
    "infer_actions",
    "is_rate_limited",
    "load_settings",
    "parse_diagnosis",
    "send_message",
]
