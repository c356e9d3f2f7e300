"""Process-wide configuration.

Read once from the environment at startup and handed to every component.
Settings are frozen; tests build their own instance instead of mutating env vars.
"""

import os
from dataclasses import dataclass, field

DEFAULT_LLM_API_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_WEATHER_API_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"


@dataclass(frozen=True)
class Settings:
    """Immutable runtime configuration."""
    groq_api_key: str = ""
    openweather_api_key: str = ""

    llm_api_url: str = DEFAULT_LLM_API_URL
    primary_model: str = DEFAULT_MODEL
    vision_model: str = DEFAULT_MODEL
    llm_timeout: float = 60.0
    max_tokens: int = 1500
    temperature: float = 0.7

    weather_api_url: str = DEFAULT_WEATHER_API_URL

    port: int = 3000
    log_level: str = "info"
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults.

        Returns:
            A frozen Settings instance.
        """
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            groq_api_key=os.environ.get("GROQ_API_KEY", ""),
            openweather_api_key=os.environ.get("OPENWEATHER_API_KEY", ""),
            llm_api_url=os.environ.get("LLM_API_URL", DEFAULT_LLM_API_URL),
            primary_model=os.environ.get("PRIMARY_MODEL", DEFAULT_MODEL),
            vision_model=os.environ.get("VISION_MODEL", DEFAULT_MODEL),
            llm_timeout=float(os.environ.get("LLM_TIMEOUT", "60")),
            max_tokens=int(os.environ.get("LLM_MAX_TOKENS", "1500")),
            temperature=float(os.environ.get("LLM_TEMPERATURE", "0.7")),
            weather_api_url=os.environ.get("WEATHER_API_URL", DEFAULT_WEATHER_API_URL).rstrip("/"),
            port=int(os.environ.get("PORT", "3000")),
            log_level=os.environ.get("LOG_LEVEL", "info"),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
