"""
Configuration module for the salon availability core.
Loads environment variables and provides typed configuration.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase (persistence collaborator)
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Local wall-clock timezone of the salon; availability works in naive
    # datetimes expressed in this zone
    timezone: str = "Europe/Prague"

    # Maximum number of per-day pipelines run at once by range queries
    availability_range_concurrency: int = 4

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None  # e.g. "availability.log", relative to log_dir
    log_dir: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def validate_all_required(self) -> None:
        """
        Validate that the settings needed by the Supabase repository are present.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        required_fields = [
            "supabase_url",
            "supabase_key",
        ]

        missing = []
        for field in required_fields:
            value = getattr(self, field, None)

            if not value:
                missing.append(field)
                continue

            # Check for placeholder values
            if str(value).lower().startswith("your_"):
                missing.append(field)

        if missing:
            raise ValueError(
                f"Missing or invalid required configuration: "
                f"{', '.join(missing)}. "
                f"Please check your .env file and ensure all required "
                f"values are set."
            )


# Global settings instance
settings = Settings()
