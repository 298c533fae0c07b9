"""Tests for configuration validation."""

from guardian.config import Config


def _use(monkeypatch, **values):
    for key, value in values.items():
        monkeypatch.setattr(Config, key, value)


def test_mock_backend_needs_no_keys(monkeypatch):
    _use(monkeypatch, CLASSIFIER_BACKEND="mock", DEEPSEEK_API_KEY="", MOCK_SEED="", CLASSIFY_TIMEOUT_S=30.0)
    assert Config.validate() == []


def test_llm_backend_requires_provider_key(monkeypatch):
    _use(monkeypatch, CLASSIFIER_BACKEND="llm", LLM_PROVIDER="deepseek", DEEPSEEK_API_KEY="", MOCK_SEED="", CLASSIFY_TIMEOUT_S=30.0)
    assert Config.validate() == ["DEEPSEEK_API_KEY"]

    _use(monkeypatch, LLM_PROVIDER="openrouter", OPENROUTER_API_KEY="")
    assert Config.validate() == ["OPENROUTER_API_KEY"]

    _use(monkeypatch, OPENROUTER_API_KEY="sk-test")
    assert Config.validate() == []


def test_unsupported_values_are_reported(monkeypatch):
    _use(monkeypatch, CLASSIFIER_BACKEND="oracle", MOCK_SEED="abc", CLASSIFY_TIMEOUT_S=0.0)
    problems = Config.validate()

    assert len(problems) == 3
    assert problems[0].startswith("CLASSIFIER_BACKEND")
    assert problems[1].startswith("MOCK_SEED")
    assert problems[2].startswith("CLASSIFY_TIMEOUT_S")


def test_unsupported_provider(monkeypatch):
    _use(monkeypatch, CLASSIFIER_BACKEND="llm", LLM_PROVIDER="gemini", MOCK_SEED="", CLASSIFY_TIMEOUT_S=30.0)
    assert Config.validate() == ["LLM_PROVIDER (unsupported: gemini)"]


def test_backend_override_does_not_touch_config(monkeypatch):
    _use(monkeypatch, CLASSIFIER_BACKEND="mock", LLM_PROVIDER="deepseek", DEEPSEEK_API_KEY="", MOCK_SEED="", CLASSIFY_TIMEOUT_S=30.0)

    assert Config.validate(backend="llm") == ["DEEPSEEK_API_KEY"]
    assert Config.validate() == []
    assert Config.CLASSIFIER_BACKEND == "mock"
