from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class Settings(BaseSettings):
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )
    log_level: str = Field(default="INFO")
    database_url: str = Field(...)
    jwt_secret_key: str = Field(...)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24)
    refresh_token_expire_minutes: int = Field(default=60 * 24 * 7)
    otp_expire_minutes: int = Field(default=10)

    ai_provider: Literal["groq", "openai", "gemini"] = Field(default="groq")
    groq_api_key: str | None = Field(default=None)
    openai_api_key: str | None = Field(default=None)
    gemini_api_key: str | None = Field(default=None)
    ai_model: str | None = Field(default=None)
    tts_model: str | None = Field(default=None)
    tts_voice: str | None = Field(default=None)

    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:9002",
            "http://127.0.0.1:9002",
        ]
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @model_validator(mode="after")
    def require_provider_key(self) -> "Settings":
        # The gateway key is checked here so a misconfigured process dies at startup.
        if not self.ai_api_key:
            raise ValueError(
                f"{self.ai_provider.upper()}_API_KEY must be set when AI_PROVIDER={self.ai_provider}"
            )
        return self

    @property
    def ai_api_key(self) -> str | None:
        return {
            "groq": self.groq_api_key,
            "openai": self.openai_api_key,
            "gemini": self.gemini_api_key,
        }[self.ai_provider]

    @property
    def ai_base_url(self) -> str | None:
        return GROQ_BASE_URL if self.ai_provider == "groq" else None


@lru_cache
def get_settings() -> Settings:
    return Settings()
