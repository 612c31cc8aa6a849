"""Attendance calendar schemas."""

from typing import Literal

from pydantic import Field

from app.schemas.common import BaseSchema

DayStatus = Literal["present", "absent", "no-school"]
TimeStatus = Literal["on-time", "late", ""]


class DayRecord(BaseSchema):
    """A single calendar day within a month."""

    day: int = Field(..., ge=1, le=31)
    is_school_day: bool
    status: DayStatus
    time_status: TimeStatus = ""
    is_weekend: bool = False
    is_sunday: bool = False
    is_holiday: bool = False


class AttendanceTotals(BaseSchema):
    """Present/absent counts with a one-decimal percentage string."""

    total_days: int = 0
    days_present: int = 0
    days_absent: int = 0
    percentage: str = "0"


class MonthBucket(AttendanceTotals):
    """Attendance for one calendar month."""

    month: int = Field(..., ge=0, le=11, description="Zero-based month (January = 0)")
    month_name: str
    year: int
    days: list[DayRecord] = []


class AttendanceCalendar(BaseSchema):
    """Year-to-date totals plus per-month calendars."""

    year_to_date: AttendanceTotals = Field(default_factory=AttendanceTotals)
    months: list[MonthBucket] = []


class AttendancePayload(BaseSchema):
    """Payload of the attendance endpoint."""

    attendance: AttendanceCalendar
