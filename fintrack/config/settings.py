"""
Configuration Management for Fintrack

Every tunable is read from the environment (or .env) through
pydantic-settings, one BaseSettings class per concern:

    AUTH_*           credential verification
    GOOGLE_SHEETS_*  the optional Sheets-backed store
    APP_*            environment, logging, store selection, CORS

A missing or malformed value fails at startup, not mid-request.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuthSettings(BaseSettings):
    """Bearer credential verification configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    jwt_secret: str = Field(
        ...,
        min_length=1,
        description="Shared secret used to verify token signatures"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Signature algorithm the issuer uses"
    )
    owner_claim: str = Field(
        default="id",
        description="Token claim holding the owner identifier"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Service account key file (JSON)"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Key of the spreadsheet holding the ledger"
    )
    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet for transactions"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """A missing key file only warns; it may be mounted after import."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Service account key not found at {v}; "
                "the Sheets store will fail to connect until it exists."
            )
        return v


class AppSettings(BaseSettings):
    """Process-wide application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Deployment name, e.g. development or production"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose diagnostics"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum log level for the structured log"
    )
    storage_backend: Literal["memory", "google_sheets"] = Field(
        default="memory",
        description="Which LedgerStore implementation to build at startup"
    )
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of origins allowed to call the API"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """Entry point that hands out each settings section on access."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so that a memory-backed deployment
    # does not need Google credentials

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings, built on first call.

    Tests call get_settings.cache_clear() after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Load each settings section the configured deployment needs.

    Returns {section: loaded_ok} plus a "<section>_error" message for
    each section that failed. Meant for a startup health check.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.auth
        results["auth"] = True
    except Exception as e:
        results["auth"] = False
        results["auth_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    # Sheets are only required when selected as the backend
    try:
        backend = settings.app.storage_backend
    except Exception:
        backend = "memory"
    if backend == "google_sheets":
        try:
            _ = settings.google_sheets
            results["google_sheets"] = True
        except Exception as e:
            results["google_sheets"] = False
            results["google_sheets_error"] = str(e)

    return results
