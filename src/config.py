from pydantic_settings import BaseSettings
from pydantic import Field, model_validator
from functools import lru_cache
from pathlib import Path
from dotenv import load_dotenv
import logging

from src.assessment.pillars import get_pillar_key_map

logger = logging.getLogger(__name__)

# Repository root .env (src -> repo root)
ROOT_ENV_FILE = Path(__file__).parent.parent / ".env"

if ROOT_ENV_FILE.exists():
    load_dotenv(ROOT_ENV_FILE, override=True)
    logger.info(f"Loaded environment from: {ROOT_ENV_FILE}")
else:
    logger.warning(f"Environment file not found: {ROOT_ENV_FILE}")


# Pillar id -> short key sent to the LLM when a request has no map of its own
DEFAULT_PILLAR_NAME_MAP: dict[str, str] = get_pillar_key_map()


class Settings(BaseSettings):
    # Application
    app_name: str = "Pillar OT Copilot"

    # Server
    cors_allowed_origins: str = "*"

    # OpenRouter (OpenAI-compatible chat completions)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-4o-mini"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 2000
    llm_timeout_seconds: float = Field(default=120.0, gt=0)
    llm_call_timeout_seconds: float = Field(default=90.0, gt=0)

    # Assessment
    default_pillar_name_map: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PILLAR_NAME_MAP)
    )

    @model_validator(mode="after")
    def validate_pillar_name_map(self):
        """The default pillar name map must name every pillar it lists."""
        if not self.default_pillar_name_map:
            raise ValueError("DEFAULT_PILLAR_NAME_MAP must not be empty")
        blank = [k for k, v in self.default_pillar_name_map.items() if not v.strip()]
        if blank:
            raise ValueError(f"DEFAULT_PILLAR_NAME_MAP has blank names for pillars: {blank}")
        return self

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins parsed from the comma separated setting."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    class Config:
        env_file = str(ROOT_ENV_FILE)
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
