"""
OpenAI-compatible chat clients (DeepSeek, OpenRouter) with retry logic and token tracking
"""

import json
import logging
import time
from collections import deque
from typing import Any

from openai import OpenAI
from tenacity import retry, stop_after_attempt, wait_exponential
from tenacity.retry import retry_if_exception

from guardian.config import config

logger = logging.getLogger(__name__)


def _is_transient_error(exc: Exception) -> bool:
    """
    Retry only on transient errors.

    Configuration/model problems (unknown model, bad key, rejected request) fail fast.
    """
    name = exc.__class__.__name__
    return name not in {
        "NotFoundError",
        "AuthenticationError",
        "PermissionDeniedError",
        "BadRequestError",
        "UnprocessableEntityError",
    }


class ChatClient:
    """Shared request/usage handling for OpenAI-compatible providers"""

    provider = "openai"

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

        # Token usage tracking
        self.total_tokens_input = 0
        self.total_tokens_output = 0
        self.request_count = 0

    def _before_request(self) -> None:
        """Hook for provider-specific throttling"""

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception(_is_transient_error),
        reraise=True,
    )
    def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.2,
        max_tokens: int = 400,
        json_mode: bool = False,
    ) -> dict[str, Any]:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (0.0-1.0)
            max_tokens: Maximum tokens in response
            json_mode: If True, request JSON response format

        Returns:
            Dict with 'content', 'raw_content', 'tokens_input', 'tokens_output'
        """
        start_time = time.time()
        self._before_request()

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(**kwargs)

        usage = getattr(response, "usage", None)
        tokens_in = int(getattr(usage, "prompt_tokens", 0) or 0) if usage is not None else 0
        tokens_out = int(getattr(usage, "completion_tokens", 0) or 0) if usage is not None else 0
        self.total_tokens_input += tokens_in
        self.total_tokens_output += tokens_out
        self.request_count += 1

        content = response.choices[0].message.content
        raw_text = content
        if json_mode:
            try:
                content = json.loads(content)
            except (json.JSONDecodeError, TypeError):
                pass  # Callers parse the raw string tolerantly

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"{self.provider} completion: {tokens_in}+{tokens_out} tokens in {elapsed_ms}ms")

        return {
            "content": content,
            "raw_content": raw_text,
            "tokens_input": tokens_in,
            "tokens_output": tokens_out,
            "processing_time_ms": elapsed_ms,
        }

    def get_usage_stats(self) -> dict[str, int]:
        """Get current session token usage statistics"""
        return {
            "total_tokens_input": self.total_tokens_input,
            "total_tokens_output": self.total_tokens_output,
            "total_tokens": self.total_tokens_input + self.total_tokens_output,
            "request_count": self.request_count,
        }

    def reset_usage_stats(self) -> None:
        self.total_tokens_input = 0
        self.total_tokens_output = 0
        self.request_count = 0


class DeepSeekClient(ChatClient):
    provider = "deepseek"

    def __init__(self):
        if not config.DEEPSEEK_API_KEY:
            raise ValueError("DEEPSEEK_API_KEY must be set when LLM_PROVIDER=deepseek")
        super().__init__(
            OpenAI(api_key=config.DEEPSEEK_API_KEY, base_url=config.DEEPSEEK_BASE_URL),
            config.DEEPSEEK_MODEL,
        )


class OpenRouterClient(ChatClient):
    """OpenRouter client with client-side RPM throttling for free tier models"""

    provider = "openrouter"

    def __init__(self):
        if not config.OPENROUTER_API_KEY:
            raise ValueError("OPENROUTER_API_KEY must be set when LLM_PROVIDER=openrouter")

        headers: dict[str, str] = {}
        if config.OPENROUTER_SITE_URL:
            headers["HTTP-Referer"] = config.OPENROUTER_SITE_URL
        if config.OPENROUTER_APP_NAME:
            headers["X-Title"] = config.OPENROUTER_APP_NAME

        kwargs: dict[str, Any] = {
            "api_key": config.OPENROUTER_API_KEY,
            "base_url": config.OPENROUTER_BASE_URL,
        }
        if headers:
            kwargs["default_headers"] = headers

        super().__init__(OpenAI(**kwargs), config.OPENROUTER_MODEL)
        self._rpm = max(0, int(config.OPENROUTER_MAX_RPM or 0))
        self._req_ts: deque[float] = deque()

    def _before_request(self) -> None:
        """Best-effort sliding-window RPM throttling."""
        if self._rpm <= 0:
            return
        window_s = 60.0
        now = time.monotonic()
        while self._req_ts and (now - self._req_ts[0]) > window_s:
            self._req_ts.popleft()
        if len(self._req_ts) >= self._rpm:
            sleep_s = window_s - (now - self._req_ts[0]) + 0.05
            if sleep_s > 0:
                logger.info(f"OpenRouter RPM limit reached, sleeping {sleep_s:.1f}s")
                time.sleep(sleep_s)
        self._req_ts.append(time.monotonic())
