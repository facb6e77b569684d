"""Environment-driven settings for the feedback service.

Everything is read once per process. Values that fail to parse fall back
to their defaults so a typo in a deploy dashboard never stops the
service from booting.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_origins(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return DEFAULT_CORS_ORIGINS
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or DEFAULT_CORS_ORIGINS


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = 0.5
    request_timeout: float = 60.0
    max_upload_bytes: int = 60 * 1024 * 1024
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    log_level: str = "INFO"
    default_sample_rate: int = 44100

    @classmethod
    def from_env(cls) -> "Settings":
        key = (os.getenv("OPENAI_API_KEY") or "").strip() or None
        return cls(
            openai_api_key=key,
            model=(os.getenv("MIX_FEEDBACK_MODEL") or DEFAULT_MODEL).strip(),
            temperature=_env_float("MIX_FEEDBACK_TEMPERATURE", 0.5),
            request_timeout=_env_float("MIX_FEEDBACK_TIMEOUT", 60.0),
            max_upload_bytes=_env_int("MIX_FEEDBACK_MAX_UPLOAD_MB", 60) * 1024 * 1024,
            cors_origins=_env_origins("MIX_FEEDBACK_CORS_ORIGINS"),
            log_level=(os.getenv("MIX_FEEDBACK_LOG_LEVEL") or "INFO").upper(),
            default_sample_rate=_env_int("MIX_FEEDBACK_DEFAULT_SAMPLE_RATE", 44100),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
