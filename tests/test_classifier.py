"""Tests for platform detection and the mock classifiers."""

import asyncio

import pytest

from guardian.moderation.classifier import (
    CancellationToken,
    LLMClassifier,
    RandomClassifier,
    ScriptedClassifier,
    build_classifier,
    detect_platform,
)
from guardian.moderation.errors import (
    ClassificationCancelledError,
    ClassificationFailedError,
    ClassificationTimeoutError,
)
from guardian.moderation.models import PLATFORMS, THREAT_TAXONOMY, Verdict


def _verdict(status="abusive", confidence=90, platform="Instagram"):
    threats = () if status == "safe" else ("Harassment and bullying language",)
    return Verdict(platform=platform, status=status, confidence=confidence, threats=threats)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://instagram.com/p/abc", "Instagram"),
        ("https://www.instagram.com/reel/xyz/", "Instagram"),
        ("instagram.com/p/abc", "Instagram"),
        ("https://x.com/someone/status/1", "Twitter"),
        ("http://twitter.com/someone", "Twitter"),
        ("https://m.facebook.com/story.php?id=1", "Facebook"),
        ("https://fb.watch/abc", "Facebook"),
        ("https://vm.tiktok.com/ZM123/", "TikTok"),
        ("https://youtu.be/dQw4w9WgXcQ", "YouTube"),
        ("https://www.youtube.com/watch?v=1", "YouTube"),
        ("https://example.com/instagram.com", None),
        ("https://notinstagram.com/p/1", None),
        ("", None),
    ],
)
def test_detect_platform(url, expected):
    assert detect_platform(url) == expected


def test_random_classifier_is_deterministic_with_seed():
    urls = [f"https://example.com/post/{i}" for i in range(10)]

    async def run(seed):
        classifier = RandomClassifier(seed=seed)
        return [await classifier.classify(url) for url in urls]

    assert asyncio.run(run(42)) == asyncio.run(run(42))


def test_random_classifier_verdicts_are_consistent():
    classifier = RandomClassifier(seed=7)

    async def run():
        return [await classifier.classify(f"https://example.com/{i}") for i in range(200)]

    verdicts = asyncio.run(run())
    statuses = {v.status for v in verdicts}
    assert statuses == {"safe", "abusive", "sexual", "mixed"}

    for v in verdicts:
        assert v.platform in PLATFORMS
        assert 70 <= v.confidence <= 99
        if v.status == "safe":
            assert v.threats == ()
        else:
            assert 1 <= len(v.threats) <= 3
            assert v.threats == THREAT_TAXONOMY[:len(v.threats)]


def test_random_classifier_uses_detected_platform():
    classifier = RandomClassifier(seed=1)

    async def run():
        return [await classifier.classify("https://www.tiktok.com/@user/video/1") for _ in range(20)]

    assert {v.platform for v in asyncio.run(run())} == {"TikTok"}


def test_scripted_classifier_returns_sequence_then_fails():
    first = _verdict("safe", 80)
    second = _verdict("sexual", 95)
    classifier = ScriptedClassifier([first, second])

    async def run():
        a = await classifier.classify("u1")
        b = await classifier.classify("u2")
        with pytest.raises(ClassificationFailedError):
            await classifier.classify("u3")
        return a, b

    assert asyncio.run(run()) == (first, second)
    assert classifier.calls == ["u1", "u2", "u3"]


def test_scripted_classifier_cycles():
    classifier = ScriptedClassifier([_verdict("safe", 80)], cycle=True)

    async def run():
        return [await classifier.classify("u") for _ in range(3)]

    assert len(asyncio.run(run())) == 3


def test_unexpected_exceptions_become_classification_failures():
    classifier = ScriptedClassifier([RuntimeError("model crashed")])

    with pytest.raises(ClassificationFailedError, match="model crashed"):
        asyncio.run(classifier.classify("https://instagram.com/p/abc"))


def test_inconsistent_verdict_is_rejected():
    bad = Verdict(platform="Instagram", status="safe", confidence=90, threats=("Hate speech patterns",))
    classifier = ScriptedClassifier([bad])

    with pytest.raises(ClassificationFailedError):
        asyncio.run(classifier.classify("https://instagram.com/p/abc"))


@pytest.mark.parametrize(
    "verdict",
    [
        Verdict(platform="MySpace", status="safe", confidence=90),
        Verdict(platform="Instagram", status="spam", confidence=90, threats=("x",)),
        Verdict(platform="Instagram", status="abusive", confidence=90),
        Verdict(platform="Instagram", status="safe", confidence=101),
    ],
)
def test_verdict_validate_rejects(verdict):
    with pytest.raises(ClassificationFailedError):
        verdict.validate()


def test_timeout():
    classifier = ScriptedClassifier([_verdict()], delay=5.0)

    with pytest.raises(ClassificationTimeoutError):
        asyncio.run(classifier.classify("https://instagram.com/p/abc", timeout=0.01))


def test_cancelled_before_start():
    async def run():
        token = CancellationToken()
        token.cancel()
        await ScriptedClassifier([_verdict()]).classify("u", cancel_token=token)

    with pytest.raises(ClassificationCancelledError):
        asyncio.run(run())


def test_cancelled_while_running():
    async def run():
        token = CancellationToken()
        classifier = ScriptedClassifier([_verdict()], delay=5.0)
        task = asyncio.ensure_future(classifier.classify("u", cancel_token=token, timeout=10.0))
        await asyncio.sleep(0)
        token.cancel()
        await task

    with pytest.raises(ClassificationCancelledError):
        asyncio.run(run())


def test_build_classifier():
    assert isinstance(build_classifier("mock", seed=3), RandomClassifier)
    assert isinstance(build_classifier(" LLM "), LLMClassifier)
    with pytest.raises(ValueError):
        build_classifier("oracle")
