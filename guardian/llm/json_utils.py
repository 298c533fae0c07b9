"""
Shared JSON parsing helpers for LLM outputs.

Some providers occasionally wrap JSON in markdown fences or include a short preamble.
These helpers keep parsing tolerant so the model-backed classifier gets a usable
payload whenever the model produced one.
"""

from __future__ import annotations

import ast
import json
import re
from typing import Any

_STATUS_ALIASES: dict[str, str] = {
    "SAFE": "safe",
    "CLEAN": "safe",
    "BENIGN": "safe",
    "OK": "safe",
    "ABUSIVE": "abusive",
    "ABUSE": "abusive",
    "HARASSMENT": "abusive",
    "HATE": "abusive",
    "VIOLENT": "abusive",
    "SEXUAL": "sexual",
    "NSFW": "sexual",
    "EXPLICIT": "sexual",
    "MIXED": "mixed",
    "BOTH": "mixed",
}

_STATUS_WORDS = "|".join(sorted(_STATUS_ALIASES, key=len, reverse=True))

# Words that also open ordinary sentences ("Ok, here is...") never count as a bare label
_CONVERSATIONAL = {"OK", "BOTH"}
_BARE_LABEL_WORDS = "|".join(
    sorted((w for w in _STATUS_ALIASES if w not in _CONVERSATIONAL), key=len, reverse=True)
)


def _strip_fences(text: str) -> str:
    t = (text or "").strip()
    if t.startswith("```"):
        t = re.sub(r"^```(?:json)?\s*", "", t, flags=re.IGNORECASE)
        t = re.sub(r"\s*```$", "", t)
    return t.strip()


def normalize_status(label: Any) -> str:
    """
    Normalize a status label from the model to safe/abusive/sexual/mixed.

    Returns:
        Normalized status, or "" if the label is not recognized
    """
    if label is None:
        return ""
    t = str(label).strip().upper().replace("-", "_").replace(" ", "_")
    return _STATUS_ALIASES.get(t, "")


def parse_json_object(value: Any) -> dict:
    """
    Best-effort parse a JSON object from an LLM response.

    Returns:
      dict: parsed object, or {} if parsing fails.
    """
    if isinstance(value, dict):
        return value
    if value is None:
        return {}
    if not isinstance(value, str):
        return {}

    text = _strip_fences(value)
    if not text:
        return {}

    # If the model outputs just a label (common in small/fast models), accept it.
    # A JSON object anywhere in the reply always wins over the first line.
    if "{" not in text:
        first_line = text.splitlines()[0].strip()
        m = re.match(rf"^({_BARE_LABEL_WORDS})\b(?:\s*[\-:,(].*)?$", first_line, flags=re.IGNORECASE)
        if m:
            return {"status": normalize_status(m.group(1))}

    candidates: list[str] = [text]
    first_curly = text.find("{")
    last_curly = text.rfind("}")
    if first_curly != -1 and last_curly != -1 and last_curly > first_curly:
        candidates.append(text[first_curly:last_curly + 1])

    for candidate in candidates:
        # Strict JSON.
        try:
            parsed = json.loads(candidate)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        # Repair trailing commas.
        repaired = re.sub(r",\s*([}\]])", r"\1", candidate)
        try:
            parsed = json.loads(repaired)
            if isinstance(parsed, dict):
                return parsed
        except json.JSONDecodeError:
            pass

        # Python literal dict fallback.
        try:
            parsed = ast.literal_eval(candidate)
            if isinstance(parsed, dict):
                return parsed
        except (ValueError, SyntaxError):
            pass

    # Key-value extraction for models that ignore "JSON only" instructions, e.g.
    # "status: abusive, confidence: 0.82"
    out: dict[str, Any] = {}
    m = re.search(
        rf"\b(status|classification|verdict)\b\s*[:=]\s*\"?\s*({_STATUS_WORDS})\b",
        text,
        flags=re.IGNORECASE,
    )
    if m:
        out["status"] = normalize_status(m.group(2))

    m = re.search(
        r"\b(confidence)\b\s*[:=]?\s*\"?\s*([0-9]+(?:\.[0-9]+)?)\s*%?",
        text,
        flags=re.IGNORECASE,
    )
    if m:
        out["confidence"] = float(m.group(2))

    return out


def normalize_confidence(value: Any, default: int = 70) -> int:
    """
    Convert a model confidence (0-1 fraction or 0-100 percent) to an integer percent.

    Values below 1 are fractions. Exactly 1 is ambiguous: the float ``1.0`` is
    read as a fraction (100%), while the integer ``1`` or string ``"1"`` is
    read as 1 percent.
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if v < 1.0 or (v == 1.0 and isinstance(value, float)):
        v *= 100.0
    return int(round(max(0.0, min(100.0, v))))
