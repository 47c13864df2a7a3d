# shiftlog/core/config.py
"""
Central configuration for the shift log backend.

This module defines a single `settings` object (Pydantic BaseSettings) that reads
configuration from environment variables and a local `.env` file.

Guiding principles:
- Config is declared once, imported everywhere.
- Sensible defaults for local dev (SQL store needs no credentials).
- Secrets (service-account JSON) live in env vars; `.env` is never committed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORE_BACKENDS = ("sheets", "sql")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and optional `.env`.

    `.env` should live next to where uvicorn is started (usually `backend/`).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    # -----------------------
    # Runtime
    # -----------------------
    ENV: str = Field(default="dev", description="Environment: dev|test|prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (e.g., INFO, DEBUG)")
    HOST: str = Field(default="0.0.0.0", description="Bind address for the dev server")
    PORT: int = Field(default=5000, ge=1, le=65535, description="Port for the dev server")

    # -----------------------
    # API / CORS
    # -----------------------
    FRONTEND_ORIGIN: str = Field(
        default="*",
        description="Allowed CORS origin(s), comma-separated",
    )

    # -----------------------
    # Backing store
    # -----------------------
    STORE_BACKEND: str = Field(default="sheets", description="Backing store: sheets|sql")

    GOOGLE_SPREADSHEET_ID: Optional[str] = Field(
        default=None,
        description="Key of the spreadsheet holding the maintenance logs",
    )
    SHEET_NAME: str = Field(default="Sheet1", description="Worksheet title")
    GOOGLE_CREDENTIALS_JSON: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Service-account info (JSON object)",
    )
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = Field(
        default=None,
        description="Path to a service-account key file (used if JSON is unset)",
    )

    # Async SQLAlchemy URL for SQLite (aiosqlite driver).
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./data/shiftlog.db",
        description="SQLAlchemy async database URL (sql backend)",
    )

    # -----------------------
    # Submissions
    # -----------------------
    TIMEZONE: str = Field(default="UTC", description="IANA zone used for submission timestamps")
    DEFAULT_LIST_LIMIT: int = Field(default=50, ge=1, le=1000)

    @property
    def CORS_ALLOW_ORIGINS(self) -> List[str]:
        """Origins parsed from FRONTEND_ORIGIN."""
        return [o.strip() for o in self.FRONTEND_ORIGIN.split(",") if o.strip()] or ["*"]

    # -----------------------
    # Validators / normalizers
    # -----------------------
    @field_validator("ENV")
    @classmethod
    def _normalize_env(cls, v: str) -> str:
        return (v or "dev").strip().lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()

    @field_validator("STORE_BACKEND")
    @classmethod
    def _check_store_backend(cls, v: str) -> str:
        backend = (v or "sheets").strip().lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}")
        return backend

    @field_validator("GOOGLE_SPREADSHEET_ID", "GOOGLE_APPLICATION_CREDENTIALS")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("SHEET_NAME", "DATABASE_URL", "TIMEZONE")
    @classmethod
    def _strip_strings(cls, v: str) -> str:
        return (v or "").strip()


# Singleton instance imported across the codebase.
settings = Settings()
