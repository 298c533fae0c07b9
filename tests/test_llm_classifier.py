"""Tests for the model-backed classifier and LLM output parsing."""

import asyncio
import json

import pytest

from guardian.llm.json_utils import normalize_confidence, normalize_status, parse_json_object
from guardian.moderation.classifier import LLMClassifier
from guardian.moderation.classifier.llm_classifier import normalize_threats
from guardian.moderation.errors import ClassificationFailedError


class FakeLLM:
    """Stands in for an OpenAI-compatible client."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def chat_completion(self, messages, temperature=0.2, max_tokens=400, json_mode=False):
        self.calls.append({"messages": messages, "json_mode": json_mode})
        if self.error:
            raise self.error
        raw = self.content if isinstance(self.content, str) else json.dumps(self.content)
        return {"content": self.content, "raw_content": raw, "tokens_input": 10, "tokens_output": 5}


def _classify(content, url="https://instagram.com/p/abc"):
    client = FakeLLM(content)
    verdict = asyncio.run(LLMClassifier(client=client).classify(url))
    return verdict, client


def test_json_verdict():
    verdict, client = _classify({
        "platform": "Instagram",
        "status": "abusive",
        "confidence": 0.92,
        "threats": ["Harassment and bullying language", "Hate speech patterns"],
        "summary": "Thread with targeted insults",
    })

    assert verdict.status == "abusive"
    assert verdict.confidence == 92
    assert verdict.threats == ("Harassment and bullying language", "Hate speech patterns")
    assert verdict.content_preview == "Thread with targeted insults"
    assert client.calls[0]["json_mode"] is True
    assert "https://instagram.com/p/abc" in client.calls[0]["messages"][1]["content"]


def test_fenced_json_string():
    content = '```json\n{"status": "SEXUAL", "confidence": 88, "threats": ["nudity"], "platform": "TikTok"}\n```'
    verdict, _ = _classify(content, url="https://vm.tiktok.com/ZM1/")

    assert verdict.status == "sexual"
    assert verdict.confidence == 88
    assert verdict.threats == ("Explicit sexual content detected",)
    assert verdict.platform == "TikTok"


def test_safe_verdict_drops_threats():
    verdict, _ = _classify({"status": "safe", "confidence": 0.97, "threats": ["Violent imagery present"]})
    assert verdict.status == "safe"
    assert verdict.threats == ()


def test_harmful_verdict_without_threats_gets_defaults():
    verdict, _ = _classify({"status": "mixed", "confidence": 0.8, "threats": []})
    assert verdict.threats == ("Explicit sexual content detected", "Harassment and bullying language")


def test_platform_from_host_wins_over_model():
    verdict, _ = _classify({"status": "safe", "confidence": 0.9, "platform": "YouTube"})
    assert verdict.platform == "Instagram"


def test_platform_from_model_when_host_unknown():
    verdict, _ = _classify({"status": "safe", "confidence": 0.9, "platform": "x"}, url="https://example.com/post")
    assert verdict.platform == "Twitter"


def test_unknown_platform_fails():
    with pytest.raises(ClassificationFailedError):
        _classify({"status": "safe", "confidence": 0.9}, url="https://example.com/post")


def test_missing_status_fails():
    with pytest.raises(ClassificationFailedError):
        _classify({"confidence": 0.9})


def test_client_error_becomes_classification_failure():
    classifier = LLMClassifier(client=FakeLLM(error=ConnectionError("provider down")))
    with pytest.raises(ClassificationFailedError, match="provider down"):
        asyncio.run(classifier.classify("https://instagram.com/p/abc"))


def test_normalize_threats_caps_and_dedupes():
    raw = ["hate speech", "Hate speech patterns", "cyberbullying", "child safety", "gore"]
    assert normalize_threats(raw, "abusive") == (
        "Hate speech patterns",
        "Cyberbullying indicators",
        "Inappropriate minor content",
    )


def test_parse_json_object_variants():
    assert parse_json_object({"status": "safe"}) == {"status": "safe"}
    assert parse_json_object('{"status": "abusive", "confidence": 0.9,}') == {"status": "abusive", "confidence": 0.9}
    assert parse_json_object("Sure! Here it is: {'status': 'mixed'}") == {"status": "mixed"}
    assert parse_json_object("ABUSIVE - harassment in comments") == {"status": "abusive"}
    assert parse_json_object("I think status: nsfw with confidence 85%") == {"status": "sexual", "confidence": 85.0}
    assert parse_json_object("no idea") == {}
    assert parse_json_object(None) == {}


def test_normalize_status_and_confidence():
    assert normalize_status("Clean") == "safe"
    assert normalize_status("harassment") == "abusive"
    assert normalize_status("whatever") == ""
    assert normalize_confidence(0.875) == 88
    assert normalize_confidence(73) == 73
    assert normalize_confidence(140) == 100
    assert normalize_confidence("n/a") == 70


def test_conversational_preamble_does_not_hide_json_verdict():
    content = (
        'Ok, here is the verdict: {"platform": "Instagram", "status": "sexual", '
        '"confidence": 0.95, "threats": ["Explicit sexual content detected"]}'
    )
    verdict, _ = _classify(content)

    assert verdict.status == "sexual"
    assert verdict.confidence == 95
    assert verdict.threats == ("Explicit sexual content detected",)


def test_conversational_words_are_not_bare_labels():
    assert parse_json_object("Ok, I could not open that link") == {}
    assert parse_json_object("Both links look fine to me") == {}
    assert parse_json_object('SAFE\n{"status": "abusive"}') == {"status": "abusive"}


def test_confidence_of_one():
    assert normalize_confidence(1) == 1
    assert normalize_confidence("1") == 1
    assert normalize_confidence(1.0) == 100
    assert normalize_confidence(0.5) == 50
    assert normalize_confidence(0) == 0
