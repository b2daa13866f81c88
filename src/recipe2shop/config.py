"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./recipe2shop.db"

    # Redis (Celery broker and result backend)
    redis_url: str = "redis://localhost:6379/0"

    # Shopping list behaviour
    # When False, "G" and "g" share a merge key.
    unit_merge_case_sensitive: bool = True
    canceled_group_label: str = "Canceled"
    shopping_list_title: str = "Shopping list"
    # JSON object of ingredient word to emoji, bundled dictionary when unset
    ingredient_emoji_file: str | None = None

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
