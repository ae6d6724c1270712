"""
Configuration Management for splitflow

Uses pydantic-settings for type-safe configuration from environment
variables (prefix SPLITFLOW_) and an optional .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the ledger files live."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("."),
        description="Directory holding the ledger files"
    )
    accounts_file: str = Field(
        default="accounts.json",
        description="Accounts registry file name"
    )
    tags_file: str = Field(
        default="tags.json",
        description="Tags registry file name"
    )
    transactions_file: str = Field(
        default="transactions.json",
        description="Ledger file name"
    )
    audit_file: str = Field(
        default="audit.jsonl",
        description="Append-only audit log file name"
    )

    @property
    def accounts_path(self) -> Path:
        return self.data_dir / self.accounts_file

    @property
    def tags_path(self) -> Path:
        return self.data_dir / self.tags_file

    @property
    def transactions_path(self) -> Path:
        return self.data_dir / self.transactions_file

    @property
    def audit_path(self) -> Path:
        return self.data_dir / self.audit_file


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPLITFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (console rendering otherwise)"
    )

    # Validation thresholds
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a purchase date can be"
    )
    max_purchase_cents: int = Field(
        default=1_000_000,
        ge=1,
        description="Purchases above this amount get a plausibility warning"
    )

    # Column widths for rendered amounts
    amount_width: int = Field(default=10, ge=1)
    delta_width: int = Field(default=10, ge=2)
    flow_width: int = Field(default=8, ge=2)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
