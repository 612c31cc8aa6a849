from datetime import date

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.services.attendance import AttendancePolicy


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.STUDENTS_RANGE == "Students"
    assert settings.ATTENDANCE_RANGE == "Attendance"
    assert settings.WEEKEND_DAYS == [6]
    assert settings.DATE_ORDER == "DMY"


def test_tokens_are_normalized():
    settings = Settings(_env_file=None, PRESENCE_TOKENS=[" P ", "Present", ""])
    assert settings.PRESENCE_TOKENS == ["p", "present"]


def test_invalid_weekday_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, WEEKEND_DAYS=[7])


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("WEEKEND_DAYS", "[5, 6]")
    monkeypatch.setenv("HOLIDAYS", '["2024-01-26"]')
    monkeypatch.setenv("DATE_ORDER", "MDY")
    settings = Settings(_env_file=None)

    policy = AttendancePolicy.from_settings(settings)
    assert policy.weekend_days == frozenset({5, 6})
    assert policy.holidays == frozenset({date(2024, 1, 26)})
    assert policy.date_order == "MDY"


def test_blank_sheet_id_is_unset():
    settings = Settings(_env_file=None, GOOGLE_SHEET_ID="  ")
    assert settings.GOOGLE_SHEET_ID is None
    assert not Settings(_env_file=None).google_credentials_configured
