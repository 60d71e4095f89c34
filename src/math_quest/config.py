"""Runtime settings, loaded from MATH_QUEST_* environment variables or a .env file."""
import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = str(Path.home() / ".math_quest" / "quest.db")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MATH_QUEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: str = Field(default=DEFAULT_DB_PATH, description="SQLite file holding player snapshots")
    player: str = Field(default="default", description="Snapshot key in the store")
    review_probability: float = Field(
        default=0.4, ge=0.0, le=1.0,
        description="Chance that a generated slot re-issues a due mistake",
    )
    questions_per_stage: int = Field(default=10, ge=1)
    review_slots: int = Field(default=3, ge=0, description="Leading slots allowed to draw from due mistakes")
    review_batch_size: int = Field(default=15, ge=1)
    log_level: str = Field(default="WARNING")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Route loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
