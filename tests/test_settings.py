import pytest

from keibaslip.runtime.settings import (
    DEFAULT_AI_ENDPOINT,
    DEFAULT_TIMEOUT_SECONDS,
    get_settings,
    load_settings,
    reset_settings,
)


def test_load_settings_defaults_when_env_empty() -> None:
    settings = load_settings({})

    assert settings.ai_enabled is False
    assert settings.vision_enabled is False
    assert settings.ai_endpoint == DEFAULT_AI_ENDPOINT
    assert settings.ai_model == "sonar"
    assert settings.ai_timeout == DEFAULT_TIMEOUT_SECONDS


def test_load_settings_reads_overrides() -> None:
    settings = load_settings(
        {
            "PERPLEXITY_API_KEY": "pk",
            "KEIBASLIP_AI_MODEL": "sonar-pro",
            "KEIBASLIP_AI_TIMEOUT": "15",
            "GCV_API_KEY": "gk",
            "KEIBASLIP_VISION_ENDPOINT": "http://localhost:9000/annotate",
        }
    )

    assert settings.ai_api_key == "pk"
    assert settings.ai_model == "sonar-pro"
    assert settings.ai_timeout == 15.0
    assert settings.vision_api_key == "gk"
    assert settings.vision_endpoint == "http://localhost:9000/annotate"


@pytest.mark.parametrize("raw", ["abc", "0", "-3", " "])
def test_invalid_timeout_uses_default(raw: str) -> None:
    assert load_settings({"KEIBASLIP_VISION_TIMEOUT": raw}).vision_timeout == DEFAULT_TIMEOUT_SECONDS


def test_repr_hides_api_keys() -> None:
    text = repr(load_settings({"PERPLEXITY_API_KEY": "secret-ai", "GCV_API_KEY": "secret-gcv"}))

    assert "secret" not in text
    assert "ai_enabled=True" in text


def test_get_settings_caches_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("PERPLEXITY_API_KEY", "later")

    assert get_settings() is first
    assert first.ai_enabled is False

    reset_settings()
    assert get_settings().ai_api_key == "later"
