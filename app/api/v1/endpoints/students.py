"""Student lookup and attendance calendar endpoints."""

import logging

from fastapi import APIRouter

from app.core.dependencies import AttendanceServiceDep, StudentServiceDep
from app.core.exceptions import BadRequestError, NotFoundError
from app.schemas.attendance import AttendanceCalendar, AttendancePayload
from app.schemas.common import DataResponse
from app.schemas.student import StudentRecord, StudentWithAttendance

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{roll_number}", response_model=DataResponse[StudentRecord])
async def get_student(roll_number: str, students: StudentServiceDep):
    """Get a student's identity record by roll number."""
    student = await students.get_student(roll_number)
    return DataResponse[StudentRecord](data=student)


@router.get("/{roll_number}/attendance", response_model=DataResponse[AttendancePayload])
async def get_student_attendance(roll_number: str, attendance: AttendanceServiceDep):
    """Get a student's attendance calendar grouped by month."""
    calendar = await attendance.get_attendance(roll_number)
    return DataResponse[AttendancePayload](data=AttendancePayload(attendance=calendar))


@router.get("/{roll_number}/combined", response_model=DataResponse[StudentWithAttendance])
async def get_student_combined(
    roll_number: str,
    students: StudentServiceDep,
    attendance: AttendanceServiceDep,
):
    """Get the identity record and attendance calendar together.

    A missing or unreadable attendance sheet yields an empty calendar
    rather than failing the whole request.
    """
    student = await students.get_student(roll_number)

    try:
        calendar = await attendance.get_attendance(roll_number)
    except (NotFoundError, BadRequestError) as e:
        logger.warning(f"[COMBINED] No attendance for roll={roll_number}: {e.message}")
        calendar = AttendanceCalendar()

    return DataResponse[StudentWithAttendance](
        data=StudentWithAttendance(student=student, attendance=calendar)
    )
