"""
LLM client factory/router.

Supported providers:
- deepseek: DeepSeekClient (OpenAI-compatible)
- openrouter: OpenRouterClient (OpenAI-compatible)
"""

from __future__ import annotations

from typing import Any, Protocol

from guardian.config import config


class LLMClient(Protocol):
    def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.2,
        max_tokens: int = 400,
        json_mode: bool = False,
    ) -> dict[str, Any]: ...

    def get_usage_stats(self) -> dict[str, int]: ...
    def reset_usage_stats(self) -> None: ...


_client: LLMClient | None = None
_provider: str | None = None


def llm() -> LLMClient:
    """Get the client for the configured provider (cached per provider)"""
    global _client, _provider

    provider = (config.LLM_PROVIDER or "deepseek").strip().lower()
    if _client is not None and _provider == provider:
        return _client

    if provider == "deepseek":
        from .clients import DeepSeekClient

        _client = DeepSeekClient()
    elif provider == "openrouter":
        from .clients import OpenRouterClient

        _client = OpenRouterClient()
    else:
        raise ValueError(f"Unsupported LLM_PROVIDER='{provider}'. Use 'deepseek' or 'openrouter'.")

    _provider = provider
    return _client


def model_label(client: Any) -> str:
    """Short provider/model label for logs"""
    provider = getattr(client, "provider", client.__class__.__name__)
    model = getattr(client, "model", "")
    return f"{provider}:{model}" if model else str(provider)
