from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_cell_grid_source
from app.main import app

STUDENTS = [
    ["Roll No", "Student Name", "Class", "School", "Date of Birth", "Father's Name", "Mother's Name"],
    ["101", "Asha Verma", "5-A", "Green Valley School", "2014-03-02", "Ramesh Verma", "Sunita Verma"],
    ["102", "Ravi Kumar", "5-B", "Green Valley School", "2014-07-19", "Anil Kumar", "Meena Kumar"],
]

TALL_ATTENDANCE = [
    ["Roll No", "Name", "Date", "Status", "Time"],
    ["101", "Asha Verma", "15/01/2024", "P", "On time"],
    ["101", "Asha Verma", "16/01/2024", "A", ""],
    ["101", "Asha Verma", "17/01/2024", "Present", "Late"],
    ["102", "Ravi Kumar", "15/01/2024", "P", ""],
    ["101", "Asha Verma", "01/02/2024", "P", ""],
    ["101", "Asha Verma", "not-a-date", "P", ""],
]

WIDE_ATTENDANCE = [
    ["Roll No", "Name", "15/01/2024", "Status", "Time", "16/01/2024", "Status", "Time"],
    ["101", "Asha Verma", "", "P", "", "", "A", ""],
    ["102", "Ravi Kumar", "", "P", "Late", "", "P", ""],
]


class InMemorySheets:
    """Cell grid source backed by a dict of range name -> rows."""

    def __init__(self, ranges: dict[str, list[list[Any]]]):
        self.ranges = ranges
        self.calls: list[str] = []

    def get_values(self, range_name: str) -> list[list[Any]]:
        self.calls.append(range_name)
        return self.ranges.get(range_name, [])


class FailingSheets:
    def __init__(self, exc: Exception):
        self.exc = exc

    def get_values(self, range_name: str) -> list[list[Any]]:
        raise self.exc


@pytest.fixture
def sheets() -> InMemorySheets:
    return InMemorySheets({"Students": STUDENTS, "Attendance": TALL_ATTENDANCE})


@pytest.fixture
def client(sheets):
    app.dependency_overrides[get_cell_grid_source] = lambda: sheets
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
