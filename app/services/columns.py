"""Column discovery for loosely structured spreadsheet headers."""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from app.services.dates import is_date_like
from app.services.sheets import cell_text

logger = logging.getLogger(__name__)

NOT_FOUND = -1

STATUS_SEARCH_WIDTH = 3
TIME_SEARCH_WIDTH = 2


@dataclass(frozen=True)
class ColumnRole:
    """A semantic column role matched by case-insensitive substring."""

    name: str
    keywords: tuple[str, ...]
    excludes: tuple[str, ...] = field(default=())

    def matches(self, label: Any) -> bool:
        text = cell_text(label).lower()
        if not text:
            return False
        if any(word in text for word in self.excludes):
            return False
        return any(word in text for word in self.keywords)


IDENTIFIER = ColumnRole("identifier", ("roll", "admission", "id"))
NAME = ColumnRole("name", ("name",), excludes=("father", "mother"))
CLASS = ColumnRole("class", ("class",))
SCHOOL = ColumnRole("school", ("school",))
DOB = ColumnRole("dob", ("dob", "birth"))
FATHER = ColumnRole("father", ("father",))
MOTHER = ColumnRole("mother", ("mother",))
DATE = ColumnRole("date", ("date",))
STATUS = ColumnRole("status", ("status", "present", "absent"))
TIME = ColumnRole("time", ("time", "late"))

ROLES: tuple[ColumnRole, ...] = (
    IDENTIFIER,
    NAME,
    CLASS,
    SCHOOL,
    DOB,
    FATHER,
    MOTHER,
    DATE,
    STATUS,
    TIME,
)


def find_column(header: Sequence[Any], role: ColumnRole, start: int = 0) -> int:
    """Return the first column at or after ``start`` matching ``role``.

    Labels are not required to be unique; the leftmost match wins and
    later matches are ignored.
    """
    for idx in range(start, len(header)):
        if role.matches(header[idx]):
            return idx
    return NOT_FOUND


def resolve_columns(header: Sequence[Any], roles: Sequence[ColumnRole] = ROLES) -> dict[str, int]:
    """Resolve every role against a header row."""
    return {role.name: find_column(header, role) for role in roles}


@dataclass(frozen=True)
class ColumnGroup:
    """One calendar date's (date, status, time) columns in a wide sheet."""

    date_col: int
    status_col: int
    time_col: int
    time_matched: bool = False


def _search(header: Sequence[Any], role: ColumnRole, start: int, width: int) -> int:
    for idx in range(start, min(start + width, len(header))):
        if role.matches(header[idx]):
            return idx
    return NOT_FOUND


def _is_date_column(label: Any) -> bool:
    return DATE.matches(label) or is_date_like(cell_text(label))


def detect_column_groups(header: Sequence[Any], identifier_col: int) -> list[ColumnGroup]:
    """Find repeating date/status/time column triples after the identifier.

    For a date column at ``i`` the status column is the first of the next
    three headers naming a status, else ``i + 1``. The time column is the
    first of the two headers after the status naming a time, else
    ``status + 1``. The scan resumes after the time column when it was
    found by name and after the status column otherwise, so a defaulted
    time column never hides the next group's date column.
    """
    groups: list[ColumnGroup] = []
    idx = max(identifier_col, NOT_FOUND) + 1

    while idx < len(header):
        if not _is_date_column(header[idx]):
            idx += 1
            continue

        status_col = _search(header, STATUS, idx + 1, STATUS_SEARCH_WIDTH)
        if status_col == NOT_FOUND:
            status_col = idx + 1

        time_col = _search(header, TIME, status_col + 1, TIME_SEARCH_WIDTH)
        time_matched = time_col != NOT_FOUND
        if not time_matched:
            time_col = status_col + 1

        groups.append(ColumnGroup(idx, status_col, time_col, time_matched))
        idx = (time_col if time_matched else status_col) + 1

    logger.debug(f"[COLUMNS] Detected {len(groups)} date column groups")
    return groups
