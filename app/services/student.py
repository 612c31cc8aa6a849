"""Student lookup against the students sheet."""

import logging
from typing import Any, Sequence

from fastapi.concurrency import run_in_threadpool

from app.core.exceptions import BadRequestError, NotFoundError
from app.schemas.student import StudentRecord
from app.services.attendance import matches_identifier
from app.services.columns import (
    CLASS,
    DOB,
    FATHER,
    IDENTIFIER,
    MOTHER,
    NAME,
    NOT_FOUND,
    SCHOOL,
    ColumnRole,
    find_column,
    resolve_columns,
)
from app.services.sheets import CellGridSource, cell_text

logger = logging.getLogger(__name__)

# StudentRecord field -> header role
STUDENT_FIELDS: tuple[tuple[str, ColumnRole], ...] = (
    ("name", NAME),
    ("class_name", CLASS),
    ("school", SCHOOL),
    ("dob", DOB),
    ("father_name", FATHER),
    ("mother_name", MOTHER),
)


def build_student_record(
    header: Sequence[Any],
    row: Sequence[Any],
    default_school: str = "",
) -> StudentRecord:
    columns = resolve_columns(header, [role for _, role in STUDENT_FIELDS])
    values = {}
    for field_name, role in STUDENT_FIELDS:
        idx = columns[role.name]
        values[field_name] = cell_text(row[idx]) if NOT_FOUND < idx < len(row) else ""
    if not values["school"]:
        values["school"] = default_school
    return StudentRecord(**values)


class StudentService:
    """Looks up a student's identity record by roll number."""

    def __init__(self, source: CellGridSource, range_name: str, default_school: str = ""):
        self.source = source
        self.range_name = range_name
        self.default_school = default_school

    async def get_student(self, roll_number: str) -> StudentRecord:
        rows = await run_in_threadpool(self.source.get_values, self.range_name)
        if not rows or len(rows) < 2:
            logger.warning(f"[STUDENT] Range '{self.range_name}' has no data rows")
            raise NotFoundError("No student data found")

        header = rows[0]
        id_col = find_column(header, IDENTIFIER)
        if id_col == NOT_FOUND:
            logger.error(f"[STUDENT] No roll number column in header: {header}")
            raise BadRequestError("Could not find roll number column in students sheet")

        for row in rows[1:]:
            if id_col < len(row) and matches_identifier(row[id_col], roll_number):
                return build_student_record(header, row, self.default_school)

        logger.info(f"[STUDENT] Roll number '{roll_number}' not found")
        raise NotFoundError("Student not found", roll_number)
