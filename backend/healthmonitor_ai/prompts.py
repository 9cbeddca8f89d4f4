from __future__ import annotations

import re
from typing import Any

from .models import UserContext, Vitals

_DATA_URI_PREFIX_RE = re.compile(r"^data:image/\w+;base64,")

IMAGE_MIME_TYPE = "image/jpeg"
IMAGE_ONLY_PROMPT = "Please analyze this health-related image."

DIAGNOSIS_SYSTEM_PROMPT = """You are an AI Symptom Analyzer for the HealthMonitor app.
Instructions:
1. Analyze the symptoms provided in text and/or the uploaded image showing a health concern (e.g., skin rash, swelling, pill identification).
2. Provide a preliminary "Clinical Impression" or "Diagnosis Label".
3. List 3-4 actionable "Recommendations".
4. Categorize the "Severity" as one of: [low, medium, high].
5. CRITICAL: If the symptoms suggest a life-threatening emergency, set severity to "high" and advise immediate medical attention.
6. Always include a disclaimer: "Not a replacement for professional medical advice."
7. Format the response as a JSON object:
   {
     "diagnosis": "Short label",
     "recommendations": ["Point 1", "Point 2", ...],
     "severity": "low|medium|high"
   }
8. Return ONLY the JSON object."""

CHAT_INSTRUCTIONS = """Instructions:
1. Be highly professional, empathetic, and health-focused.
2. Analyze the user's vitals if provided.
3. Use markdown for formatting (bolding important terms).
4. Provide actionable health tips.
5. CRITICAL: If you detect a life-threatening symptom (like severe chest pain or very high BP), advise the user to seek immediate medical help or use the SOS button.
6. Always include a disclaimer that you are an AI assistant and not a replacement for professional medical advice.
7. Answer in the language the user speaks to you (Supports English, Spanish, French, Tamil).
8. You can suggest actions like "Log Vitals", "Emergency SOS", or "View History" if relevant.

Return the response as a direct message string."""


def strip_data_uri_prefix(image_base64: str) -> str:
    return _DATA_URI_PREFIX_RE.sub("", image_base64, count=1)


def _vital(value: float | None) -> str:
    # Zero is treated as "not recorded", same as missing.
    if not value:
        return "N/A"
    return f"{value:g}"


def format_vitals(vitals: Vitals | None) -> str:
    if vitals is None:
        return "No recent vitals available."
    return (
        f"User Vitals: Heart Rate {_vital(vitals.heart_rate)} bpm, "
        f"BP {_vital(vitals.systolic_bp)}/{_vital(vitals.diastolic_bp)} mmHg, "
        f"Weight {_vital(vitals.weight)} kg."
    )


def build_chat_system_prompt(context: UserContext | None = None) -> str:
    context = context or UserContext()
    lines = [
        "You are an Advanced AI Health Companion for the HealthMonitor app.",
        "Context:",
        f"- User Name: {context.user_name or 'User'}",
        f"- User Role: {context.role or 'Patient'}",
        f"- {format_vitals(context.latest_vitals)}",
    ]
    if context.language:
        lines.append(f"- Preferred Language: {context.language}")
    return "\n".join(lines) + "\n\n" + CHAT_INSTRUCTIONS


def _request(parts: list[dict[str, Any]]) -> dict[str, Any]:
    return {"contents": [{"parts": parts}]}


def build_diagnosis_request(symptoms: str, image_base64: str | None = None) -> dict[str, Any]:
    # The image-only phrase is used whenever the text is empty, even with no image attached.
    prompt_text = f"User Symptoms: {symptoms}" if symptoms else IMAGE_ONLY_PROMPT
    parts: list[dict[str, Any]] = [{"text": f"{DIAGNOSIS_SYSTEM_PROMPT}\n\n{prompt_text}"}]
    if image_base64:
        parts.append(
            {
                "inline_data": {
                    "mime_type": IMAGE_MIME_TYPE,
                    "data": strip_data_uri_prefix(image_base64),
                }
            }
        )
    return _request(parts)


def build_chat_request(text: str, context: UserContext | None = None) -> dict[str, Any]:
    return _request([{"text": f"{build_chat_system_prompt(context)}\n\nUser Question: {text}"}])
