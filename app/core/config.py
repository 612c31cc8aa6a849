"""Application configuration settings."""

from datetime import date
from functools import lru_cache
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Student Attendance Calendar API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]

    # Data source
    DATA_SOURCE: Literal["google", "excel"] = "google"
    GOOGLE_SHEET_ID: str | None = None
    GOOGLE_SERVICE_ACCOUNT_JSON: str | None = None
    GOOGLE_SERVICE_ACCOUNT_FILE: str | None = None
    EXCEL_WORKBOOK_PATH: str | None = None

    # Ranges
    STUDENTS_RANGE: str = "Students"
    ATTENDANCE_RANGE: str = "Attendance"
    SCHOOL_NAME: str = ""

    # Attendance heuristics
    ATTENDANCE_LAYOUT: Literal["auto", "tall", "wide"] = "auto"
    DATE_ORDER: Literal["DMY", "MDY"] = "DMY"
    PRESENCE_TOKENS: list[str] = ["p", "present"]
    PRESENCE_EXACT_TOKENS: list[str] = ["1"]
    LATE_TOKENS: list[str] = ["late", "delay"]
    WEEKEND_DAYS: list[int] = [6]  # Python weekday numbers, Monday=0
    HOLIDAYS: list[date] = []

    @field_validator("PRESENCE_TOKENS", "PRESENCE_EXACT_TOKENS", "LATE_TOKENS", mode="after")
    @classmethod
    def lowercase_tokens(cls, v: list[str]) -> list[str]:
        return [token.strip().lower() for token in v if token.strip()]

    @field_validator("WEEKEND_DAYS", mode="after")
    @classmethod
    def validate_weekdays(cls, v: list[int]) -> list[int]:
        for day in v:
            if not 0 <= day <= 6:
                raise ValueError(f"Invalid weekday: {day} (expected 0-6)")
        return v

    @field_validator("GOOGLE_SHEET_ID", "GOOGLE_SERVICE_ACCOUNT_JSON", "EXCEL_WORKBOOK_PATH", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def google_credentials_configured(self) -> bool:
        """Whether any service account credentials were supplied."""
        return bool(self.GOOGLE_SERVICE_ACCOUNT_JSON or self.GOOGLE_SERVICE_ACCOUNT_FILE)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
