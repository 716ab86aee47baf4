"""
Configuration module for the Wayne AI Gateway.
Handles environment variables, provider credentials and application settings.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration class."""

    # Provider credentials
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    STABILITY_API_KEY: str = os.getenv("STABILITY_API_KEY", "")

    # Gateway key checked by APIKeyMiddleware
    API_KEY: str = os.getenv("API_KEY", "")

    # Provider endpoints
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    STABILITY_BASE_URL: str = "https://api.stability.ai/v1"

    # Provider models
    GEMINI_MODELS = {
        "text": "gemini-pro",
        "multimodal": "gemini-pro-vision",
    }
    OPENAI_MODELS = {
        "chat": "gpt-3.5-turbo",
        "image": "dall-e-3",
    }
    STABILITY_ENGINES = {
        "sdxl": "stable-diffusion-xl-1024-v1-0",
        "sd_1_5": "stable-diffusion-v1-5",
        "sd_2_1": "stable-diffusion-512-v2-1",
    }

    # Lower number = tried first
    GEMINI_PRIORITY: int = 1
    OPENAI_PRIORITY: int = 2
    STABILITY_PRIORITY: int = 1

    # Application Settings
    APP_TITLE: str = "Wayne AI Gateway"
    HISTORY_LIMIT: int = 50
    CHAT_HISTORY_LIMIT: int = 50
    CONVERSATION_ARCHIVE_LIMIT: int = 20
    CONVERSATION_TITLE_LENGTH: int = 30
    DEFAULT_SESSION_ID: str = "default"

    # Persistence
    DATA_DIR: str = os.getenv("DATA_DIR", "data")
    STORAGE_DB_PATH: str = os.getenv("STORAGE_DB_PATH", str(Path(DATA_DIR) / "storage.db"))

    # Best-effort in-memory cache of provider responses (no TTL, no eviction)
    ENABLE_RESPONSE_CACHE: bool = _env_flag("ENABLE_RESPONSE_CACHE", False)

    # Timeouts (in seconds)
    PROVIDER_TIMEOUT: float = float(os.getenv("PROVIDER_TIMEOUT", "120"))

    # Connection pool
    MAX_PROVIDER_CONNECTIONS: int = 10

    # Generation defaults
    DEFAULT_TEMPERATURE: float = 0.7
    CODE_TEMPERATURE: float = 0.2
    SUMMARY_TEMPERATURE: float = 0.3
    DEFAULT_MAX_TOKENS: int = 2048
    DEFAULT_IMAGE_SIZE: str = "1024x1024"
    DEFAULT_IMAGE_WIDTH: int = 1024
    DEFAULT_IMAGE_HEIGHT: int = 1024
    DEFAULT_CFG_SCALE: float = 7
    DEFAULT_STEPS: int = 30

    # Worker proxy: requested model -> (provider, model)
    PROXY_MODEL_ROUTES = {
        "gpt-3.5-turbo": ("openai", "gpt-3.5-turbo"),
        "gpt-4": ("openai", "gpt-4"),
        "gemini-pro": ("gemini", "gemini-pro"),
    }
    PROXY_DEFAULT_ROUTE = ("openai", "gpt-4")

    @classmethod
    def resolve_proxy_model(cls, model: str | None) -> tuple[str, str]:
        """Map a worker-style model name to (provider name, provider model)."""
        if model and model in cls.PROXY_MODEL_ROUTES:
            return cls.PROXY_MODEL_ROUTES[model]
        return cls.PROXY_DEFAULT_ROUTE

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing API keys."""
        if not cls.API_KEY:
            print("   WARNING: API_KEY not found in .env file")
            print("   Every request will be rejected until a gateway key is configured.")

        if not cls.GEMINI_API_KEY:
            print("   WARNING: GEMINI_API_KEY not found in .env file")
            print("   Gemini text and code generation will be disabled.")

        if not cls.OPENAI_API_KEY:
            print("   WARNING: OPENAI_API_KEY not found in .env file")
            print("   OpenAI chat, code and DALL-E image generation will be disabled.")

        if not cls.STABILITY_API_KEY:
            print("   WARNING: STABILITY_API_KEY not found in .env file")
            print("   Stable Diffusion image generation will be disabled.")

Config.validate()
