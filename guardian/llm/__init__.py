"""
LLM module - OpenAI-compatible provider clients and parsing utilities
"""

from .factory import LLMClient, llm
from .json_utils import normalize_confidence, normalize_status, parse_json_object

__all__ = ["LLMClient", "llm", "normalize_confidence", "normalize_status", "parse_json_object"]
