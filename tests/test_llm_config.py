"""
Tests for settings loading and LLM provider selection (SDK clients mocked).
"""

import os
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tellcmg.config import (
    DEFAULT_INTERVIEW_MODEL,
    DEFAULT_STRUCTURE_MODEL,
    IDEA_RECIPIENT,
    LLMSettings,
    Settings,
    load_env_file,
)
from tellcmg.llm import LLMPurpose, Message, ProviderStatus, create_llm_provider
from tellcmg.llm.factory import PURPOSE_LIMITS

ENV_KEYS = (
    "OPENROUTER_API_KEY", "GROQ_API_KEY", "TELLCMG_LLM_PROVIDER", "TELLCMG_HOME",
    "SMTP_USER", "SMTP_PASSWORD", "SMTP_PORT", "PORT", "TELLCMG_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return tmp_path / "missing.env"


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.load(clean_env)
        assert settings.llm.provider == "auto"
        assert not settings.llm.is_configured
        assert not settings.mail.is_configured
        assert settings.mail.recipient == IDEA_RECIPIENT
        assert settings.home_dir == Path.home() / ".tellcmg"
        assert settings.port == 5001

    def test_environment_values(self, clean_env, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "or-key")
        monkeypatch.setenv("SMTP_USER", "bot@cmgfi.com")
        monkeypatch.setenv("SMTP_PASSWORD", "secret")
        monkeypatch.setenv("SMTP_PORT", "not-a-number")
        monkeypatch.setenv("TELLCMG_LOG_LEVEL", "debug")

        settings = Settings.load(clean_env)
        assert settings.llm.is_configured
        assert settings.mail.is_configured
        assert settings.mail.port == 587
        assert settings.log_level == "DEBUG"

    def test_unknown_provider_means_auto(self, clean_env, monkeypatch):
        monkeypatch.setenv("TELLCMG_LLM_PROVIDER", "ollama")
        assert Settings.load(clean_env).llm.provider == "auto"

    def test_env_file_does_not_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "from-env")
        # Registered so the value written by load_env_file is undone afterwards
        monkeypatch.setenv("TELLCMG_HOME", "")
        monkeypatch.delenv("TELLCMG_HOME")
        env_file = tmp_path / ".env"
        env_file.write_text('# comment\nGROQ_API_KEY=from-file\nTELLCMG_HOME="/tmp/tellcmg-test"\n')

        load_env_file(env_file)

        assert os.environ["GROQ_API_KEY"] == "from-env"
        assert os.environ["TELLCMG_HOME"] == "/tmp/tellcmg-test"


class TestProviderSelection:
    def test_unconfigured_returns_none(self):
        assert create_llm_provider(LLMSettings()) is None

    def test_disabled_returns_none(self):
        assert create_llm_provider(LLMSettings(provider="none", openrouter_api_key="k")) is None

    @patch("tellcmg.llm.openrouter_provider.OpenAI")
    def test_openrouter_models_per_purpose(self, mock_openai):
        settings = LLMSettings(openrouter_api_key="or-key", groq_api_key="groq-key")

        structuring = create_llm_provider(settings, LLMPurpose.STRUCTURING)
        interview = create_llm_provider(settings, LLMPurpose.INTERVIEW)

        assert structuring.name == "openrouter"
        assert structuring.model == DEFAULT_STRUCTURE_MODEL
        assert structuring.config.max_tokens == PURPOSE_LIMITS[LLMPurpose.STRUCTURING]["max_tokens"]
        assert interview.model == DEFAULT_INTERVIEW_MODEL
        assert interview.config.max_tokens == 1000
        assert mock_openai.call_args[1]["base_url"] == "https://openrouter.ai/api/v1"
        assert mock_openai.call_args[1]["max_retries"] == 0

    @patch("tellcmg.llm.groq_provider.Groq")
    def test_explicit_groq(self, mock_groq):
        settings = LLMSettings(provider="groq", openrouter_api_key="or-key", groq_api_key="groq-key")
        provider = create_llm_provider(settings)
        assert provider.name == "groq"
        assert provider.is_available()

    def test_explicit_provider_without_key(self):
        assert create_llm_provider(LLMSettings(provider="groq", openrouter_api_key="k")) is None


class TestOpenRouterChat:
    @patch("tellcmg.llm.openrouter_provider.OpenAI")
    def test_generate_returns_text(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.return_value = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="# Idea"), finish_reason="stop")],
            model="anthropic/claude-opus-4",
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )
        provider = create_llm_provider(LLMSettings(openrouter_api_key="k"))

        response = provider.chat([Message(role="user", content="hi")])

        assert response.content == "# Idea"
        assert response.usage["total_tokens"] == 15
        kwargs = client.chat.completions.create.call_args[1]
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 2000

    @patch("tellcmg.llm.openrouter_provider.OpenAI")
    def test_failure_is_raised_once(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.side_effect = RuntimeError("429 rate limit")
        provider = create_llm_provider(LLMSettings(openrouter_api_key="k"))

        with pytest.raises(RuntimeError):
            provider.generate([Message(role="user", content="hi")])
        assert client.chat.completions.create.call_count == 1
        assert provider.status == ProviderStatus.RATE_LIMITED

