"""Application settings using Pydantic BaseSettings for environment variable management."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Scoring weights and thresholds are fixed in config.scoring_tables; only
    deployment concerns and the location of the lookup-table file live here.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        scoring_tables_path: Optional JSON file overriding the lookup tables
        max_text_length: Longest post text accepted at intake
        max_image_bytes: Largest image accepted at intake
    """

    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    scoring_tables_path: str | None = Field(
        default=None,
        description="Path to a JSON file with venue/nickname/city lookup tables"
    )
    max_text_length: int = Field(
        default=10_000,
        description="Maximum post text length in characters"
    )
    max_image_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum image size in bytes"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance - import this throughout the application
settings = Settings()
