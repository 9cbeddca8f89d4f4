from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from loguru import logger

_ENV_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "VITE_GEMINI_API_KEY")
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_API_VERSION = "v1beta"

MISSING_KEY_MESSAGE = "AI Configuration Missing: Please add GEMINI_API_KEY to your .env file."


def load_local_env_file(path: Path) -> None:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not _ENV_KEY_RE.fullmatch(key):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ.setdefault(key, value)


def bootstrap_local_env(repo_root: Path | None = None) -> None:
    root = repo_root or Path(__file__).resolve().parents[2]
    for candidate in (root / ".env", root / "backend/.env"):
        if candidate.exists():
            load_local_env_file(candidate)


def _parse_timeout(raw: str | None) -> float | None:
    value = (raw or "").strip()
    if not value:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logger.warning("[AI] Ignoring invalid GEMINI_TIMEOUT_SECONDS={!r}", value)
        return None
    if timeout <= 0:
        logger.warning("[AI] Ignoring non-positive GEMINI_TIMEOUT_SECONDS={!r}", value)
        return None
    return timeout


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    api_version: str = DEFAULT_API_VERSION
    timeout_seconds: float | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def models_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.api_version}/models"

    @property
    def generate_content_url(self) -> str:
        return f"{self.models_url}/{self.model}:generateContent"

    def masked_key(self) -> str:
        return f"{self.api_key[:10]}..." if self.api_key else "NOT FOUND"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        api_key = ""
        for name in API_KEY_ENV_VARS:
            api_key = (env.get(name) or "").strip()
            if api_key:
                break
        settings = cls(
            api_key=api_key,
            model=(env.get("GEMINI_MODEL") or DEFAULT_MODEL).strip(),
            api_base=(env.get("GEMINI_API_BASE_URL") or DEFAULT_API_BASE).strip().rstrip("/"),
            api_version=(env.get("GEMINI_API_VERSION") or DEFAULT_API_VERSION).strip(),
            timeout_seconds=_parse_timeout(env.get("GEMINI_TIMEOUT_SECONDS")),
        )
        if not settings.configured:
            logger.warning("[AI] {}", MISSING_KEY_MESSAGE)
        return settings


def load_settings() -> Settings:
    bootstrap_local_env()
    return Settings.from_env()
