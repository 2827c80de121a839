"""Settingsのテスト"""
import pytest

from src.infrastructure.config.settings import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEOCODING_TIMEOUT", raising=False)
    monkeypatch.delenv("GEOCODING_PROVIDER", raising=False)

    settings = Settings(_env_file=None)

    assert settings.geocoding_provider == "openstreetmap"
    assert settings.geocoding_timeout == 10000
    assert settings.geocoding_timeout_seconds == 10.0
    assert settings.geocoding_min_delay == 1.0
    assert settings.llm_model == "gpt-4o-mini"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    monkeypatch.setenv("GEOCODING_TIMEOUT", "2500")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings(_env_file=None)

    assert settings.openai_api_key == "sk-from-env"
    assert settings.geocoding_timeout_seconds == 2.5
    assert settings.is_production
    assert not settings.is_development
