from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


SEVERITY_LEVELS = ("low", "medium", "high")

Severity = Literal["low", "medium", "high"]
Sender = Literal["user", "ai"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_message_id() -> str:
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class DiagnosisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    diagnosis: str = Field(min_length=1)
    recommendations: list[str] = Field(min_length=1)
    severity: Severity


class ChatAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    action: str


class ChatMessage(BaseModel):
    id: str = Field(default_factory=new_message_id)
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=utc_now)
    language: str | None = None
    actions: list[ChatAction] | None = None

    @field_validator("actions")
    @classmethod
    def _no_empty_actions(cls, value: list[ChatAction] | None) -> list[ChatAction] | None:
        return value or None


class Vitals(BaseModel):
    model_config = ConfigDict(frozen=True)

    heart_rate: float | None = None
    systolic_bp: float | None = None
    diastolic_bp: float | None = None
    weight: float | None = None


class UserContext(BaseModel):
    """Read-only health context supplied by the UI to personalise chat prompts."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: str | None = None
    user_name: str | None = Field(default=None, alias="userName")
    latest_vitals: Vitals | None = Field(default=None, alias="latestVitals")
    language: str | None = None


# Provider envelope. Only the fields this layer navigates are modelled; the rest is ignored.


class EnvelopePart(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str | None = None


class EnvelopeContent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    parts: list[EnvelopePart] = Field(default_factory=list)


class Candidate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: EnvelopeContent | None = None
    finishReason: str | None = None
    safetyRatings: list[Any] | None = None


class PromptFeedback(BaseModel):
    model_config = ConfigDict(extra="ignore")

    blockReason: str | None = None


class ProviderError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str | None = None


class ProviderEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    candidates: list[Candidate] | None = None
    promptFeedback: PromptFeedback | None = None
    error: ProviderError | None = None
