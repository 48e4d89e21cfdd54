"""Unit tests for startup settings."""

import pytest

from backend.core.config import (
    DEFAULT_DEEPSEEK_BASE_URL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OPENAI_BASE_URL,
    Settings,
)


class TestFromEnv:

    def test_reads_keys(self):
        s = Settings.from_env({
            "CHATGPT_API_KEY": "a",
            "DEEPSEEK_API_KEY": "b",
            "GEMINI_API_KEY": "c",
        })
        assert (s.openai_api_key, s.deepseek_api_key, s.gemini_api_key) == ("a", "b", "c")

    def test_defaults(self):
        s = Settings.from_env({})
        assert s.openai_api_key == ""
        assert s.openai_base_url == DEFAULT_OPENAI_BASE_URL
        assert s.deepseek_base_url == DEFAULT_DEEPSEEK_BASE_URL
        assert s.gemini_model == DEFAULT_GEMINI_MODEL
        assert s.request_timeout is None
        assert s.cors_origins == ("*",)

    def test_whitespace_key_counts_as_missing(self):
        s = Settings.from_env({"CHATGPT_API_KEY": "   "})
        assert s.configured()["openai"] is False

    def test_base_url_trailing_slash_stripped(self):
        s = Settings.from_env({"OPENAI_BASE_URL": "http://localhost:9000/v1/"})
        assert s.openai_base_url == "http://localhost:9000/v1"

    def test_timeout_parsed(self):
        assert Settings.from_env({"RELAY_TIMEOUT": "12.5"}).request_timeout == 12.5

    def test_blank_timeout_means_none(self):
        assert Settings.from_env({"RELAY_TIMEOUT": ""}).request_timeout is None

    @pytest.mark.parametrize("raw", ["0", "-3", "soon"])
    def test_bad_timeout_rejected(self, raw):
        with pytest.raises(ValueError):
            Settings.from_env({"RELAY_TIMEOUT": raw})

    def test_cors_origins_split(self):
        s = Settings.from_env({"CORS_ORIGINS": "http://a.test, http://b.test"})
        assert s.cors_origins == ("http://a.test", "http://b.test")

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert Settings.from_env().gemini_api_key == "from-env"


def test_configured_reports_presence_only(settings):
    assert settings.configured() == {"openai": True, "deepseek": True, "gemini": True}
