"""
Mock classifiers for demos and deterministic tests
"""

import asyncio
import random
from typing import Iterable

from ..errors import ClassificationFailedError
from ..models import (
    DEFAULT_CONTENT_PREVIEW,
    PLATFORMS,
    STATUS_SAFE,
    STATUSES,
    THREAT_TAXONOMY,
    Verdict,
)
from .base import ContentClassifier
from .platforms import detect_platform


class RandomClassifier(ContentClassifier):
    """
    Random verdicts in the shape a real model would produce.

    - platform: detected from the URL host, else random
    - status: uniform over safe/abusive/sexual/mixed
    - confidence: 70-99
    - threats: first 1-3 taxonomy labels for harmful content, none for safe
    """

    name = "mock"

    MIN_CONFIDENCE = 70
    MAX_CONFIDENCE = 99
    MAX_THREATS = 3

    def __init__(self, seed: int | None = None, latency: float = 0.0):
        self.rng = random.Random(seed)
        self.latency = latency

    async def _classify(self, url: str) -> Verdict:
        if self.latency:
            await asyncio.sleep(self.latency)

        platform = detect_platform(url) or self.rng.choice(PLATFORMS)
        status = self.rng.choice(STATUSES)
        threat_count = self.rng.randint(1, self.MAX_THREATS)
        confidence = self.rng.randint(self.MIN_CONFIDENCE, self.MAX_CONFIDENCE)

        threats = () if status == STATUS_SAFE else THREAT_TAXONOMY[:threat_count]
        return Verdict(
            platform=platform,
            status=status,
            confidence=confidence,
            threats=tuple(threats),
            content_preview=DEFAULT_CONTENT_PREVIEW,
        )


class ScriptedClassifier(ContentClassifier):
    """
    Returns a fixed sequence of verdicts.

    Items may be exceptions, which are raised in turn. Once the script runs
    out the classifier fails unless ``cycle`` is set.
    """

    name = "scripted"

    def __init__(self, verdicts: Iterable[Verdict | Exception], delay: float = 0.0, cycle: bool = False):
        self.script = list(verdicts)
        self.delay = delay
        self.cycle = cycle
        self.calls: list[str] = []

    async def _classify(self, url: str) -> Verdict:
        if self.delay:
            await asyncio.sleep(self.delay)

        index = len(self.calls)
        self.calls.append(url)
        if self.cycle and self.script:
            index %= len(self.script)
        if index >= len(self.script):
            raise ClassificationFailedError("Scripted classifier has no verdicts left")

        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return item
