from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .models import ChatAction


@dataclass(frozen=True)
class ActionRule:
    action: ChatAction
    matches: Callable[[str], bool]


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    return lambda lowered: any(keyword in lowered for keyword in keywords)


def _matches_phrase(*phrases: str) -> Callable[[str], bool]:
    # Word boundaries keep e.g. "catalog vitals" from matching.
    pattern = re.compile(r"\b(" + "|".join(re.escape(phrase) for phrase in phrases) + r")\b")
    return lambda lowered: pattern.search(lowered) is not None


SOS_ACTION = ChatAction(label="Emergency SOS", action="trigger_sos")
LOG_VITALS_ACTION = ChatAction(label="Log Vitals", action="log_vitals")

# Evaluated in order; each rule contributes at most one action.
ACTION_RULES = (
    ActionRule(SOS_ACTION, _contains_any("sos", "emergency")),
    ActionRule(LOG_VITALS_ACTION, _matches_phrase("log vitals", "track metrics", "record vitals")),
)


def infer_actions(text: str) -> list[ChatAction] | None:
    lowered = (text or "").lower()
    actions = [rule.action for rule in ACTION_RULES if rule.matches(lowered)]
    return actions or None
