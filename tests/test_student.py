import asyncio

import pytest

from app.core.exceptions import NotFoundError
from app.services.student import StudentService, build_student_record
from tests.conftest import STUDENTS, InMemorySheets


def test_build_student_record_resolves_every_field():
    record = build_student_record(STUDENTS[0], STUDENTS[2])
    assert record.name == "Ravi Kumar"
    assert record.class_name == "5-B"
    assert record.dob == "2014-07-19"
    assert record.father_name == "Anil Kumar"
    assert record.mother_name == "Meena Kumar"


def test_build_student_record_missing_columns():
    header = ["Admission No", "Mother Name", "Student Name"]
    record = build_student_record(header, ["7", "Lata"], default_school="Hill Side")

    assert record.mother_name == "Lata"
    assert record.name == ""
    assert record.class_name == ""
    assert record.school == "Hill Side"


def test_service_matches_roll_number_case_insensitively():
    sheets = InMemorySheets({"Students": [["Admission ID", "Name"], ["ab-12", "Kiran"]]})
    service = StudentService(sheets, "Students")

    assert asyncio.run(service.get_student(" AB-12 ")).name == "Kiran"
    assert sheets.calls == ["Students"]


def test_service_unknown_roll_number():
    service = StudentService(InMemorySheets({"Students": STUDENTS}), "Students")
    with pytest.raises(NotFoundError, match="Student not found"):
        asyncio.run(service.get_student("404"))
