from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Default database URL: a SQLite file next to the project root.

    Production deployments set DATABASE_URL explicitly.
    """
    db_path = Path(__file__).parent.parent.parent / "shootsync.db"
    return f"sqlite:///{db_path.resolve()}"


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    chars_per_line: int = Field(
        default=60,
        validation_alias="SHOOTSYNC_CHARS_PER_LINE",
        description="Characters that fit on one screenplay line",
    )
    lines_per_page: int = Field(
        default=55,
        validation_alias="SHOOTSYNC_LINES_PER_PAGE",
        description="Lines in a standard single screenplay page",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("chars_per_line", "lines_per_page")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Page geometry must be positive."""
        if value <= 0:
            raise ValueError(f"page geometry values must be positive, got {value}")
        return value


settings = Settings()
