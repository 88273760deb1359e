"""
Binzingo Cardy - Application Settings

Loads configuration from environment variables using Pydantic Settings.
Every value has a sensible default so the engine runs without a .env file.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Table rules
    turn_time_limit: int = 45
    hand_size: int = 4
    max_players: int = 10

    # Bots
    bot_delay_min: float = 1.5
    bot_delay_max: float = 2.5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "BINZINGO_",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the package logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("binzingo").setLevel(level)
