"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefixed with CROSSCHESS_) or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CROSSCHESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database (archive of finished matches)
    database_url: str = "sqlite:///./crosschess.db"
    database_echo: bool = False

    # Seats without a connected human are played by the random agent after this delay
    auto_move_delay_seconds: float = 2.0

    max_players_per_room: int = 4

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
