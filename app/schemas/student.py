"""Student schemas."""

from pydantic import Field

from app.schemas.attendance import AttendanceCalendar
from app.schemas.common import BaseSchema


class StudentRecord(BaseSchema):
    """Student identity as read from the students sheet."""

    name: str = ""
    class_name: str = Field("", alias="class")
    school: str = ""
    dob: str = ""
    father_name: str = ""
    mother_name: str = ""


class StudentWithAttendance(BaseSchema):
    """Payload of the combined endpoint."""

    student: StudentRecord
    attendance: AttendanceCalendar
