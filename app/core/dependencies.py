"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.attendance import AttendancePolicy, AttendanceService
from app.services.sheets import CellGridSource, build_source
from app.services.student import StudentService


def get_cell_grid_source(
    settings: Annotated[Settings, Depends(get_settings)],
) -> CellGridSource:
    """Build the configured spreadsheet source for this request."""
    return build_source(settings)


def get_attendance_policy(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AttendancePolicy:
    return AttendancePolicy.from_settings(settings)


def get_student_service(
    source: Annotated[CellGridSource, Depends(get_cell_grid_source)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> StudentService:
    return StudentService(source, settings.STUDENTS_RANGE, settings.SCHOOL_NAME)


def get_attendance_service(
    source: Annotated[CellGridSource, Depends(get_cell_grid_source)],
    policy: Annotated[AttendancePolicy, Depends(get_attendance_policy)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AttendanceService:
    return AttendanceService(source, settings.ATTENDANCE_RANGE, policy)


StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]
AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
