"""API configuration using Pydantic Settings."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from ..models.generation import DEFAULT_MODEL


class Settings(BaseSettings):
    """API configuration loaded from environment."""

    PROJECT_NAME: str = "Model Studio API"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Gemini (loaded from .env)
    GEMINI_API_KEY: str = Field(
        default="", validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY")
    )
    GEMINI_MODEL: str = DEFAULT_MODEL
    GEMINI_TIMEOUT_SECONDS: float = 120.0

    # Upload limits
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    ALLOWED_MIME_TYPES: list[str] = [
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/heic",
        "image/heif",
    ]

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins, stricter in production."""
        if self.is_production and not self.CORS_ORIGINS:
            # In production with no explicit origins, deny all
            return []
        return self.CORS_ORIGINS

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
