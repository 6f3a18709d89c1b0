"""Runtime settings.

Usage:
    from tesvik_engine.config.settings import settings
    print(settings.bsmv_rate)

Values come from ``TESVIK_*`` environment variables or a ``.env`` file.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TESVIK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Payment plan levies (fractions of each period's interest) ---
    bsmv_rate: float = Field(default=0.05, ge=0, le=1.0)
    kkdf_rate: float = Field(default=0.15, ge=0, le=1.0)

    # --- API ---
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    # Comma-separated list of allowed frontend origins
    cors_origins: str = "*"

    # --- Logging ---
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        """Split comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the API / dashboard processes."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Module-level singleton
settings = Settings()
