import logging
import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Configuration for the account store file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="DATABASE_", extra="ignore"
    )

    path: str = Field("accounts.db", description="Path to the account store file")
    timeout: float = Field(30.0, gt=0, description="Seconds to wait for locks and pooled connections")
    reader_pool_size: int = Field(4, ge=1, description="Number of read-only connections")


class SeedSettings(BaseSettings):
    """Configuration for seeding fake accounts at startup."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="SEED_", extra="ignore"
    )

    count: int = Field(100, ge=0, description="Number of fake accounts to seed")
    strict: bool = Field(False, description="Abort seeding on the first failed write")


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    debug: bool = Field(False, description="Enable debug mode for development")
    log_level: str = Field("INFO", description="Logging level")

    db: DatabaseSettings = DatabaseSettings()
    seed: SeedSettings = SeedSettings()

    @property
    def log_level_value(self) -> int:
        """Return the numeric value of the log level."""
        return logging.getLevelName(self.log_level.upper())


@lru_cache
def get_settings() -> AppSettings:
    """
    Get application settings.
    If the TEST_MODE environment variable is set, it returns a configuration
    suitable for testing, otherwise loads the configuration from the .env file.
    """
    if os.getenv("TEST_MODE"):
        return AppSettings(
            debug=True,
            log_level="DEBUG",
            db=DatabaseSettings(path="test_accounts.db", timeout=5.0, reader_pool_size=2),
            seed=SeedSettings(count=10, strict=True),
        )
    return AppSettings()
