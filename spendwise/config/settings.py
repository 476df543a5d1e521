"""
Configuration Management for the SpendWise Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The password hashing parameters are deliberately NOT configurable: they are
part of the persisted credential format (see services/credentials).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spendwise.models.ledger import DebtSettlementPolicy


class LedgerSettings(BaseSettings):
    """
    Ledger storage and settlement configuration.

    Loads from SPENDWISE_* environment variables and the .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Storage location
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / "SpendWiseData",
        description="Directory holding the ledger file"
    )
    data_file_name: str = Field(
        default="Data.json",
        min_length=1,
        description="Name of the ledger file inside data_dir"
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of the written ledger file"
    )

    # Write hardening
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failing write is attempted"
    )
    write_retry_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Base wait between write attempts (exponential backoff)"
    )
    quarantine_corrupt_files: bool = Field(
        default=True,
        description="Move an unreadable ledger file aside instead of overwriting it"
    )

    # Policy
    settlement_policy: DebtSettlementPolicy = Field(
        default=DebtSettlementPolicy.BALANCE_CHECKED,
        description="Whether settling a debt requires sufficient available balance"
    )

    @field_validator('data_file_name')
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """The ledger file must sit directly inside data_dir."""
        if Path(v).name != v:
            raise ValueError(f"data_file_name must be a bare file name, got {v!r}")
        return v

    @property
    def data_file(self) -> Path:
        """Full path to the ledger file."""
        return self.data_dir.expanduser() / self.data_file_name


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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    return results
