"""Tests for provider factories and configuration."""

import pytest

from nido.analysis import EmbeddingGenerator, GeminiProvider, GroqProvider, get_llm_provider
from nido.config import get_settings


@pytest.fixture
def no_api_keys(monkeypatch):
    for var in ("GEMINI_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()


class TestLLMProviderFactory:
    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="no soportado"):
            get_llm_provider("openai")

    def test_gemini_requires_key(self, no_api_keys):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            GeminiProvider()

    def test_groq_requires_key(self, no_api_keys):
        with pytest.raises(ValueError, match="GROQ_API_KEY"):
            GroqProvider()

    def test_embeddings_require_gemini_key(self, no_api_keys):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            EmbeddingGenerator()


class TestSettings:
    def test_search_defaults(self, monkeypatch):
        for var in ("DISPLAY_LIMIT", "OVERSAMPLING_FACTOR", "FALLBACK_DISPLAY_LIMIT", "FUZZY_MATCH_THRESHOLD"):
            monkeypatch.delenv(var, raising=False)
        settings = get_settings()
        assert settings.display_limit == 5
        assert settings.fallback_display_limit == 10
        assert settings.candidate_pool_size == 25
        assert settings.fuzzy_match_threshold == 0.75

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("OVERSAMPLING_FACTOR", "4")
        assert get_settings().candidate_pool_size == 20
