"""Attendance aggregation into per-month calendars."""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from fastapi.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.schemas.attendance import (
    AttendanceCalendar,
    AttendanceTotals,
    DayRecord,
    MonthBucket,
)
from app.services.columns import (
    DATE,
    IDENTIFIER,
    NOT_FOUND,
    STATUS,
    TIME,
    ColumnGroup,
    detect_column_groups,
    find_column,
)
from app.services.dates import parse_date
from app.services.sheets import CellGridSource, cell_text

logger = logging.getLogger(__name__)

SUNDAY = 6


@dataclass(frozen=True)
class AttendancePolicy:
    """Tunable heuristics for reading attendance sheets."""

    layout: str = "auto"
    date_order: str = "DMY"
    presence_tokens: frozenset[str] = frozenset({"p", "present"})
    presence_exact_tokens: frozenset[str] = frozenset({"1"})
    late_tokens: frozenset[str] = frozenset({"late", "delay"})
    weekend_days: frozenset[int] = frozenset({SUNDAY})
    holidays: frozenset[date] = frozenset()

    @classmethod
    def from_settings(cls, settings: Settings) -> "AttendancePolicy":
        return cls(
            layout=settings.ATTENDANCE_LAYOUT,
            date_order=settings.DATE_ORDER,
            presence_tokens=frozenset(settings.PRESENCE_TOKENS),
            presence_exact_tokens=frozenset(settings.PRESENCE_EXACT_TOKENS),
            late_tokens=frozenset(settings.LATE_TOKENS),
            weekend_days=frozenset(settings.WEEKEND_DAYS),
            holidays=frozenset(settings.HOLIDAYS),
        )


@dataclass(frozen=True)
class AttendanceEntry:
    """One raw (date, status, time) reading for a student."""

    date_value: Any
    status_value: Any
    time_value: Any = None
    has_time: bool = False


def is_present(status_value: Any, policy: AttendancePolicy) -> bool:
    """Classify a status cell.

    Substring matching on ``p`` is deliberately broad: any token
    containing the letter counts as present.
    """
    text = cell_text(status_value).lower()
    if text in policy.presence_exact_tokens:
        return True
    return any(token in text for token in policy.presence_tokens)


def time_status(entry: AttendanceEntry, present: bool, policy: AttendancePolicy) -> str:
    if entry.has_time:
        text = cell_text(entry.time_value).lower()
        if any(token in text for token in policy.late_tokens):
            return "late"
    return "on-time" if present else ""


def format_percentage(present: int, total: int) -> str:
    if total == 0:
        return "0"
    # Ties round up: 1 of 16 days is "6.3"
    value = Decimal(present * 100) / Decimal(total)
    return str(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass
class _MonthBuilder:
    year: int
    month: int  # 1-12
    days: dict[int, DayRecord] = field(default_factory=dict)

    def _flags(self, day: int, policy: AttendancePolicy) -> dict[str, bool]:
        current = date(self.year, self.month, day)
        return {
            "is_weekend": current.weekday() in policy.weekend_days,
            "is_sunday": current.weekday() == SUNDAY,
            "is_holiday": current in policy.holidays,
        }

    def record(self, day: int, present: bool, timing: str, policy: AttendancePolicy) -> None:
        # A later reading for the same day replaces the earlier one
        self.days[day] = DayRecord(
            day=day,
            is_school_day=True,
            status="present" if present else "absent",
            time_status=timing,
            **self._flags(day, policy),
        )

    def build(self, policy: AttendancePolicy) -> MonthBucket:
        present = sum(1 for d in self.days.values() if d.status == "present")
        absent = sum(1 for d in self.days.values() if d.status == "absent")

        _, days_in_month = calendar.monthrange(self.year, self.month)
        days = []
        for day in range(1, days_in_month + 1):
            record = self.days.get(day)
            if record is None:
                record = DayRecord(
                    day=day,
                    is_school_day=False,
                    status="no-school",
                    time_status="",
                    **self._flags(day, policy),
                )
            days.append(record)

        return MonthBucket(
            month=self.month - 1,
            month_name=calendar.month_name[self.month],
            year=self.year,
            total_days=present + absent,
            days_present=present,
            days_absent=absent,
            percentage=format_percentage(present, present + absent),
            days=days,
        )


def aggregate_attendance(
    entries: Iterable[AttendanceEntry],
    policy: AttendancePolicy | None = None,
) -> AttendanceCalendar:
    """Fold raw attendance readings into month buckets and totals."""
    policy = policy or AttendancePolicy()
    builders: dict[tuple[int, int], _MonthBuilder] = {}
    skipped = 0

    for entry in entries:
        parsed = parse_date(entry.date_value, policy.date_order)
        if parsed is None:
            skipped += 1
            continue

        key = (parsed.year, parsed.month)
        builder = builders.get(key)
        if builder is None:
            builder = builders[key] = _MonthBuilder(year=parsed.year, month=parsed.month)

        present = is_present(entry.status_value, policy)
        builder.record(parsed.day, present, time_status(entry, present, policy), policy)

    if skipped:
        logger.debug(f"[ATTENDANCE] Skipped {skipped} entries with missing or invalid dates")

    months = [builders[key].build(policy) for key in sorted(builders)]
    total_present = sum(m.days_present for m in months)
    total_absent = sum(m.days_absent for m in months)

    return AttendanceCalendar(
        year_to_date=AttendanceTotals(
            total_days=total_present + total_absent,
            days_present=total_present,
            days_absent=total_absent,
            percentage=format_percentage(total_present, total_present + total_absent),
        ),
        months=months,
    )


def _cell(row: Sequence[Any], idx: int) -> Any:
    if idx == NOT_FOUND or idx >= len(row):
        return None
    return row[idx]


def matches_identifier(value: Any, roll_number: str) -> bool:
    return cell_text(value).lower() == roll_number.strip().lower()


def tall_entries(header: Sequence[Any], rows: Sequence[Sequence[Any]], roll_number: str) -> list[AttendanceEntry]:
    """Entries from a sheet with one row per (student, date)."""
    id_col = find_column(header, IDENTIFIER)
    if id_col == NOT_FOUND:
        raise BadRequestError("Could not find roll number column in attendance sheet")

    date_col = find_column(header, DATE)
    status_col = find_column(header, STATUS)
    if date_col == NOT_FOUND or status_col == NOT_FOUND:
        raise BadRequestError(
            "Could not find date or status column in attendance sheet",
            details={"date_col": date_col, "status_col": status_col},
        )
    time_col = find_column(header, TIME)

    entries = []
    for row in rows:
        if not matches_identifier(_cell(row, id_col), roll_number):
            continue
        entries.append(
            AttendanceEntry(
                date_value=_cell(row, date_col),
                status_value=_cell(row, status_col),
                time_value=_cell(row, time_col),
                has_time=time_col != NOT_FOUND and time_col < len(row),
            )
        )
    return entries


def wide_entries(
    header: Sequence[Any],
    rows: Sequence[Sequence[Any]],
    roll_number: str,
    groups: Sequence[ColumnGroup] | None = None,
    date_order: str = "DMY",
) -> list[AttendanceEntry]:
    """Entries from a sheet with one row per student and a column group per date."""
    id_col = find_column(header, IDENTIFIER)
    if id_col == NOT_FOUND:
        raise BadRequestError("Could not find roll number column in attendance sheet")

    if groups is None:
        groups = detect_column_groups(header, id_col)
    if not groups:
        raise BadRequestError("No date columns found in attendance sheet")

    row = next((r for r in rows if matches_identifier(_cell(r, id_col), roll_number)), None)
    if row is None:
        return []

    entries = []
    for group in groups:
        date_value = _cell(row, group.date_col)
        if parse_date(date_value, date_order) is None:
            date_value = _cell(header, group.date_col)
        entries.append(
            AttendanceEntry(
                date_value=date_value,
                status_value=_cell(row, group.status_col),
                time_value=_cell(row, group.time_col),
                has_time=group.time_col < len(row),
            )
        )
    return entries


class AttendanceService:
    """Builds a student's attendance calendar from the attendance sheet."""

    def __init__(self, source: CellGridSource, range_name: str, policy: AttendancePolicy):
        self.source = source
        self.range_name = range_name
        self.policy = policy

    def _choose_layout(self, header: Sequence[Any]) -> tuple[str, list[ColumnGroup] | None]:
        if self.policy.layout == "tall":
            return "tall", None
        id_col = find_column(header, IDENTIFIER)
        groups = detect_column_groups(header, id_col) if id_col != NOT_FOUND else []
        if self.policy.layout == "wide" or len(groups) > 1:
            return "wide", groups
        # A single group headed by an actual date rather than a "Date" label
        # is a wide sheet with one recorded day
        if any(not DATE.matches(header[g.date_col]) for g in groups):
            return "wide", groups
        return "tall", None

    async def get_attendance(self, roll_number: str) -> AttendanceCalendar:
        """Fetch the attendance range and aggregate one student's calendar."""
        rows = await run_in_threadpool(self.source.get_values, self.range_name)
        if not rows or len(rows) < 2:
            logger.warning(f"[ATTENDANCE] Range '{self.range_name}' has no data rows")
            raise NotFoundError("No attendance data found")

        header, data_rows = rows[0], rows[1:]
        layout, groups = self._choose_layout(header)
        logger.info(f"[ATTENDANCE] roll={roll_number} layout={layout} rows={len(data_rows)}")

        if layout == "wide":
            entries = wide_entries(header, data_rows, roll_number, groups, self.policy.date_order)
        else:
            entries = tall_entries(header, data_rows, roll_number)

        if not entries:
            raise NotFoundError("No attendance records found for student", roll_number)

        return aggregate_attendance(entries, self.policy)
