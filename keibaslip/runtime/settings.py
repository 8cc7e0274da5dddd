"""Environment-driven settings for the OCR and AI collaborators.

This module is the single place that reads API keys and endpoints, so the
rest of the package receives a ``Settings`` instance instead of touching
``os.environ`` directly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_AI_ENDPOINT = "https://api.perplexity.ai/chat/completions"
DEFAULT_AI_MODEL = "sonar"
DEFAULT_VISION_ENDPOINT = "https://vision.googleapis.com/v1/images:annotate"
DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class Settings:
    """Endpoints, credentials and timeouts for external services."""

    ai_api_key: str | None = None
    ai_endpoint: str = DEFAULT_AI_ENDPOINT
    ai_model: str = DEFAULT_AI_MODEL
    ai_timeout: float = DEFAULT_TIMEOUT_SECONDS
    vision_api_key: str | None = None
    vision_endpoint: str = DEFAULT_VISION_ENDPOINT
    vision_timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_api_key)

    @property
    def vision_enabled(self) -> bool:
        return bool(self.vision_api_key)

    def __repr__(self) -> str:
        # Keys stay out of logs and tracebacks.
        return (
            f"Settings(ai_enabled={self.ai_enabled}, ai_endpoint={self.ai_endpoint!r}, "
            f"ai_model={self.ai_model!r}, vision_enabled={self.vision_enabled}, "
            f"vision_endpoint={self.vision_endpoint!r})"
        )


def _read_timeout(env: Mapping[str, str], name: str) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables (or an explicit mapping)."""
    if env is None:
        env = os.environ

    return Settings(
        ai_api_key=env.get("PERPLEXITY_API_KEY") or None,
        ai_endpoint=env.get("KEIBASLIP_AI_ENDPOINT") or DEFAULT_AI_ENDPOINT,
        ai_model=env.get("KEIBASLIP_AI_MODEL") or DEFAULT_AI_MODEL,
        ai_timeout=_read_timeout(env, "KEIBASLIP_AI_TIMEOUT"),
        vision_api_key=env.get("GCV_API_KEY") or None,
        vision_endpoint=env.get("KEIBASLIP_VISION_ENDPOINT") or DEFAULT_VISION_ENDPOINT,
        vision_timeout=_read_timeout(env, "KEIBASLIP_VISION_TIMEOUT"),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the process-wide settings instance.

    Returns:
        The cached Settings, loaded from the environment on first use.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
