"""
Configuration Management for Design Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Each concern gets its own settings class with its own env prefix, so a
missing Gemini key never prevents the ledger itself from loading.
"""

import json
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where and how the ledger document is persisted."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(file|memory|google_sheets)$",
        description="Storage backend: file, memory or google_sheets"
    )
    data_dir: Path = Field(
        default=Path(".design_ledger"),
        description="Directory holding the ledger document and sync signal"
    )
    storage_key: str = Field(
        default="design_ledger_db",
        min_length=1,
        description="Key the whole ledger document is stored under"
    )
    channel_name: str = Field(
        default="ledger_sync_channel",
        min_length=1,
        description="Name of the change notification channel"
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description="How often the file channel checks for remote changes"
    )


class LedgerSettings(BaseSettings):
    """Behavioural knobs of the ledger core."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        extra="ignore"
    )

    security_log_limit: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum number of security logs retained"
    )
    bridge_param: str = Field(
        default="bridge",
        min_length=1,
        description="Query parameter carrying the bridge blob"
    )
    currency_label: str = Field(
        default="Rs.",
        description="Currency prefix used in reports"
    )
    activity_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of entries in the recent activity feed"
    )


class AuthorizedUser(BaseModel):
    """One entry of the static login allowlist."""

    email: str
    name: str
    role: str = Field(pattern="^(DESIGNER|JOB_GIVER)$")
    password: str


class AuthSettings(BaseSettings):
    """
    Static login allowlist.

    LEDGER_AUTH_USERS holds a JSON list of
    {"email", "name", "role", "password"} objects.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_AUTH_",
        extra="ignore"
    )

    users: list[AuthorizedUser] = Field(
        default_factory=list,
        description="Users allowed to log in"
    )

    @field_validator('users', mode='before')
    @classmethod
    def parse_users(cls, v):
        """Accept the allowlist as a JSON string as well as a list."""
        if isinstance(v, str):
            return json.loads(v) if v.strip() else []
        return v


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=512,
        ge=100,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )
    state_sheet_name: str = Field(
        default="LedgerState",
        description="Name of the sheet holding ledger documents"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Make sure it exists before running the application."
            )
        return v


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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()


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

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the groups that failed.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "ledger", "auth", "gemini", "google_sheets"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
