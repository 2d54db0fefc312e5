from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Gemini
    GEMINI_API_KEY: str = Field(..., min_length=1)
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_TEMPERATURE: float = 0.2

    # Storage
    DATABASE_URL: str = "sqlite:///./math_learning.db"

    # HTTP
    FRONTEND_URL: str = "http://localhost:3001"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = "development"

    # Uploads / OCR
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: list[str] = ["image/jpeg", "image/png", "image/gif"]
    OCR_LANGUAGE: str = "eng"

    # Practice loop
    SIMILAR_ON_WRONG: bool = True

    LOG_LEVEL: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Build the settings once; raises ValidationError when GEMINI_API_KEY is missing."""
    return Settings()
