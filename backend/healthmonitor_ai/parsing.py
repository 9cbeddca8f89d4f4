from __future__ import annotations

import json
import re
from typing import Any

from .errors import MalformedResultError
from .models import SEVERITY_LEVELS, DiagnosisResult

_CODE_FENCE_RE = re.compile(r"```json|```")

DEFAULT_DIAGNOSIS = "Analysis Complete"
DEFAULT_SEVERITY = "low"
DEFAULT_RECOMMENDATION = "Consult a healthcare professional for a proper evaluation."


def strip_code_fences(text: str) -> str:
    return _CODE_FENCE_RE.sub("", text or "").strip()


def extract_json_object(raw_text: str) -> dict[str, Any] | None:
    """Parse ``raw_text`` as a JSON object, falling back to the first balanced ``{...}`` block."""
    text = (raw_text or "").strip()
    if not text:
        return None
    try:
        payload = json.loads(text)
        if isinstance(payload, dict):
            return payload
    except json.JSONDecodeError:
        pass

    for start_idx in [idx for idx, char in enumerate(text) if char == "{"]:
        depth = 0
        for end_idx in range(start_idx, len(text)):
            char = text[end_idx]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            if depth == 0:
                candidate = text[start_idx : end_idx + 1]
                try:
                    payload = json.loads(candidate)
                    if isinstance(payload, dict):
                        return payload
                except json.JSONDecodeError:
                    break
                break
    return None


def _normalize_recommendations(raw: Any) -> list[str]:
    recommendations: list[str] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, str) and item.strip():
                recommendations.append(item)
    return recommendations or [DEFAULT_RECOMMENDATION]


def _normalize_severity(raw: Any) -> str:
    severity = raw.strip().lower() if isinstance(raw, str) else ""
    return severity if severity in SEVERITY_LEVELS else DEFAULT_SEVERITY


def normalize_diagnosis(payload: dict[str, Any]) -> DiagnosisResult:
    diagnosis = payload.get("diagnosis")
    if not isinstance(diagnosis, str) or not diagnosis.strip():
        diagnosis = DEFAULT_DIAGNOSIS
    return DiagnosisResult(
        diagnosis=diagnosis,
        recommendations=_normalize_recommendations(payload.get("recommendations")),
        severity=_normalize_severity(payload.get("severity")),
    )


def parse_diagnosis(text: str) -> DiagnosisResult:
    payload = extract_json_object(strip_code_fences(text))
    if payload is None:
        raise MalformedResultError("AI returned a diagnosis that is not valid JSON.")
    return normalize_diagnosis(payload)
