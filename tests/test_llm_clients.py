"""Tests for the OpenAI-compatible chat client wrapper."""

from types import SimpleNamespace

import pytest
from tenacity import wait_none

from guardian.llm.clients import ChatClient
from guardian.llm.factory import model_label


class AuthenticationError(Exception):
    pass


class FakeCompletions:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=outcome))],
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=4),
        )


def _client(outcomes, monkeypatch):
    monkeypatch.setattr(ChatClient.chat_completion.retry, "wait", wait_none())
    completions = FakeCompletions(outcomes)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return ChatClient(fake, "test-model"), completions


def test_json_mode_parses_content(monkeypatch):
    client, completions = _client(['{"status": "safe", "confidence": 0.9}'], monkeypatch)
    response = client.chat_completion([{"role": "user", "content": "hi"}], json_mode=True)

    assert response["content"] == {"status": "safe", "confidence": 0.9}
    assert response["raw_content"] == '{"status": "safe", "confidence": 0.9}'
    assert completions.requests[0]["response_format"] == {"type": "json_object"}
    assert completions.requests[0]["model"] == "test-model"
    assert client.get_usage_stats() == {
        "total_tokens_input": 12,
        "total_tokens_output": 4,
        "total_tokens": 16,
        "request_count": 1,
    }


def test_invalid_json_is_returned_as_text(monkeypatch):
    client, _ = _client(["SAFE"], monkeypatch)
    response = client.chat_completion([{"role": "user", "content": "hi"}], json_mode=True)
    assert response["content"] == "SAFE"


def test_transient_errors_are_retried(monkeypatch):
    client, completions = _client([ConnectionError("reset"), TimeoutError("slow"), "ok"], monkeypatch)
    response = client.chat_completion([{"role": "user", "content": "hi"}])

    assert response["content"] == "ok"
    assert len(completions.requests) == 3


def test_auth_errors_fail_fast(monkeypatch):
    client, completions = _client([AuthenticationError("bad key"), "ok"], monkeypatch)

    with pytest.raises(AuthenticationError):
        client.chat_completion([{"role": "user", "content": "hi"}])
    assert len(completions.requests) == 1


def test_retries_give_up_after_three_attempts(monkeypatch):
    client, completions = _client([ConnectionError("down")] * 3, monkeypatch)

    with pytest.raises(ConnectionError):
        client.chat_completion([{"role": "user", "content": "hi"}])
    assert len(completions.requests) == 3


def test_model_label():
    client = ChatClient(SimpleNamespace(), "deepseek-chat")
    assert model_label(client) == "openai:deepseek-chat"
    assert model_label(object()) == "object"
