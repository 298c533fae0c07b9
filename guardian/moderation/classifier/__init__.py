"""
Content Classifier Module
Pluggable verdict producers: mock variants and a model-backed variant
"""

from .base import CancellationToken, ContentClassifier
from .llm_classifier import LLMClassifier
from .mock import RandomClassifier, ScriptedClassifier
from .platforms import detect_platform, extract_host


def build_classifier(backend: str = "mock", seed: int | None = None) -> ContentClassifier:
    """
    Create the classifier for a backend name.

    Args:
        backend: "mock" or "llm"
        seed: Seed for the mock classifier
    """
    backend = (backend or "mock").strip().lower()
    if backend == "mock":
        return RandomClassifier(seed=seed)
    if backend == "llm":
        return LLMClassifier()
    raise ValueError(f"Unsupported classifier backend '{backend}'. Use 'mock' or 'llm'.")


__all__ = [
    "CancellationToken",
    "ContentClassifier",
    "LLMClassifier",
    "RandomClassifier",
    "ScriptedClassifier",
    "build_classifier",
    "detect_platform",
    "extract_host",
]
