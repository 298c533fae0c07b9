"""
Model-backed content classifier
Asks the configured LLM provider for a JSON verdict
"""

import asyncio
import logging
from typing import Any

from guardian.llm import llm, normalize_confidence, normalize_status, parse_json_object
from guardian.llm.factory import LLMClient, model_label

from ..errors import ClassificationFailedError
from ..models import (
    DEFAULT_CONTENT_PREVIEW,
    PLATFORMS,
    STATUS_ABUSIVE,
    STATUS_MIXED,
    STATUS_SAFE,
    STATUS_SEXUAL,
    THREAT_CYBERBULLYING,
    THREAT_EXPLICIT_SEXUAL,
    THREAT_HARASSMENT,
    THREAT_HATE_SPEECH,
    THREAT_MINOR_SAFETY,
    THREAT_TAXONOMY,
    THREAT_VIOLENT_IMAGERY,
    Verdict,
)
from .base import ContentClassifier
from .platforms import detect_platform
from .prompts import SYSTEM_PROMPT, construct_analysis_prompt

logger = logging.getLogger(__name__)

# Keyword -> taxonomy label, checked in order
_THREAT_KEYWORDS: list[tuple[str, str]] = [
    ("cyberbull", THREAT_CYBERBULLYING),
    ("minor", THREAT_MINOR_SAFETY),
    ("child", THREAT_MINOR_SAFETY),
    ("sexual", THREAT_EXPLICIT_SEXUAL),
    ("explicit", THREAT_EXPLICIT_SEXUAL),
    ("nud", THREAT_EXPLICIT_SEXUAL),
    ("harass", THREAT_HARASSMENT),
    ("bully", THREAT_HARASSMENT),
    ("violen", THREAT_VIOLENT_IMAGERY),
    ("gore", THREAT_VIOLENT_IMAGERY),
    ("hate", THREAT_HATE_SPEECH),
]

# Used when the model flags content without naming a usable threat
_DEFAULT_THREATS: dict[str, tuple[str, ...]] = {
    STATUS_ABUSIVE: (THREAT_HARASSMENT,),
    STATUS_SEXUAL: (THREAT_EXPLICIT_SEXUAL,),
    STATUS_MIXED: (THREAT_EXPLICIT_SEXUAL, THREAT_HARASSMENT),
}

MAX_THREATS = 3


def normalize_threats(raw: Any, status: str) -> tuple[str, ...]:
    """Map free-form threat labels onto the taxonomy, consistent with status"""
    if status == STATUS_SAFE:
        return ()

    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raw = []

    labels: list[str] = []
    for entry in raw:
        text = str(entry).strip()
        if not text:
            continue
        match = next((t for t in THREAT_TAXONOMY if t.lower() == text.lower()), None)
        if match is None:
            lowered = text.lower()
            match = next((label for key, label in _THREAT_KEYWORDS if key in lowered), None)
        if match and match not in labels:
            labels.append(match)

    if not labels:
        labels = list(_DEFAULT_THREATS[status])
    return tuple(labels[:MAX_THREATS])


def normalize_platform(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if text in {"x", "x.com"}:
        return "Twitter"
    return next((p for p in PLATFORMS if p.lower() == text), None)


class LLMClassifier(ContentClassifier):
    """
    Content classifier backed by an OpenAI-compatible chat model.

    The blocking client call runs in a worker thread so the event loop stays
    responsive and the base class can enforce timeout/cancellation.
    """

    name = "llm"

    def __init__(self, client: LLMClient | None = None, temperature: float = 0.2, max_tokens: int = 400):
        self._llm = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def llm(self) -> LLMClient:
        """Lazy load LLM client"""
        if self._llm is None:
            self._llm = llm()
        return self._llm

    async def _classify(self, url: str) -> Verdict:
        return await asyncio.to_thread(self._classify_sync, url)

    def _classify_sync(self, url: str) -> Verdict:
        platform_hint = detect_platform(url)
        response = self.llm.chat_completion(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": construct_analysis_prompt(url, platform_hint)},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=True,
        )

        payload = parse_json_object(response.get("content"))
        if not payload:
            payload = parse_json_object(response.get("raw_content"))
        logger.debug(
            f"{model_label(self.llm)} verdict for {url}: {payload} "
            f"({response.get('tokens_input', 0)}+{response.get('tokens_output', 0)} tokens)"
        )
        return self.verdict_from_payload(url, payload, platform_hint)

    @staticmethod
    def verdict_from_payload(url: str, payload: dict, platform_hint: str | None = None) -> Verdict:
        """
        Build a Verdict from a parsed model payload.

        Raises:
            ClassificationFailedError: status or platform cannot be determined
        """
        status = normalize_status(payload.get("status") or payload.get("classification"))
        if not status:
            raise ClassificationFailedError(f"Model returned no usable status for {url}")

        platform = platform_hint or normalize_platform(payload.get("platform"))
        if platform is None:
            raise ClassificationFailedError(f"Could not determine platform for {url}")

        if "confidence" not in payload:
            logger.warning(f"Model omitted confidence for {url}, using default")

        summary = str(payload.get("summary") or "").strip()
        return Verdict(
            platform=platform,
            status=status,
            confidence=normalize_confidence(payload.get("confidence")),
            threats=normalize_threats(payload.get("threats"), status),
            content_preview=summary[:200] if summary else DEFAULT_CONTENT_PREVIEW,
        )
