"""
Configuration module - Load environment variables and settings
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "y", "on"}


class Config:
    """Application configuration from environment variables"""

    # Classifier backend
    # Supported: mock (default), llm
    CLASSIFIER_BACKEND: str = os.getenv("CLASSIFIER_BACKEND", "mock")
    MOCK_SEED: str = os.getenv("MOCK_SEED", "")

    # Pipeline timing
    STAGE_DELAY_MS: int = _env_int("STAGE_DELAY_MS", 800)
    CLASSIFY_TIMEOUT_S: float = _env_float("CLASSIFY_TIMEOUT_S", 30.0)

    # Reported model accuracy (percent), not derived from session counters
    MODEL_ACCURACY: float = _env_float("MODEL_ACCURACY", 94.7)

    # How many notifications the notification center keeps for polling clients
    NOTIFICATION_HISTORY: int = _env_int("NOTIFICATION_HISTORY", 100)

    # LLM provider (used only when CLASSIFIER_BACKEND=llm)
    # Supported: deepseek (default), openrouter
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "deepseek")

    # DeepSeek API
    DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")
    DEEPSEEK_BASE_URL: str = os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com")
    DEEPSEEK_MODEL: str = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")

    # OpenRouter
    OPENROUTER_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")
    OPENROUTER_BASE_URL: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    OPENROUTER_MODEL: str = os.getenv("OPENROUTER_MODEL", "openai/gpt-oss-120b:free")
    # Optional attribution headers
    OPENROUTER_SITE_URL: str = os.getenv("OPENROUTER_SITE_URL", "")
    OPENROUTER_APP_NAME: str = os.getenv("OPENROUTER_APP_NAME", "")
    # Client-side throttling for free tier models (requests per minute, 0 disables)
    OPENROUTER_MAX_RPM: int = _env_int("OPENROUTER_MAX_RPM", 12)

    # Dashboard
    DASHBOARD_HOST: str = os.getenv("DASHBOARD_HOST", "127.0.0.1")
    DASHBOARD_PORT: int = _env_int("DASHBOARD_PORT", 5000)

    # Debug
    DEBUG: bool = _env_bool("DEBUG")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls, backend: str | None = None) -> list[str]:
        """
        Validate required configuration.

        Args:
            backend: Classifier backend to validate for (default: CLASSIFIER_BACKEND)

        Returns:
            List of missing or invalid configs
        """
        missing = []

        backend = (backend or cls.CLASSIFIER_BACKEND or "mock").strip().lower()
        if backend == "llm":
            provider = (cls.LLM_PROVIDER or "deepseek").strip().lower()
            if provider == "deepseek":
                if not cls.DEEPSEEK_API_KEY:
                    missing.append("DEEPSEEK_API_KEY")
            elif provider == "openrouter":
                if not cls.OPENROUTER_API_KEY:
                    missing.append("OPENROUTER_API_KEY")
            else:
                missing.append(f"LLM_PROVIDER (unsupported: {cls.LLM_PROVIDER})")
        elif backend != "mock":
            missing.append(f"CLASSIFIER_BACKEND (unsupported: {backend})")

        if cls.MOCK_SEED and not cls.MOCK_SEED.lstrip("-").isdigit():
            missing.append(f"MOCK_SEED (not an integer: {cls.MOCK_SEED})")

        if cls.CLASSIFY_TIMEOUT_S <= 0:
            missing.append("CLASSIFY_TIMEOUT_S (must be positive)")

        return missing


# Singleton instance
config = Config()
