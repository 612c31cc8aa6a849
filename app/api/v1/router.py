"""Main API router aggregating all module routers."""

from fastapi import APIRouter

from app.api.v1.endpoints import students
from app.schemas.common import ErrorResponse

api_router = APIRouter()

# Error envelope shared by every lookup endpoint
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "A required column could not be detected"},
    404: {"model": ErrorResponse, "description": "Student or sheet data not found"},
    500: {"model": ErrorResponse, "description": "Data source or unexpected failure"},
}

# Students and their attendance calendars
api_router.include_router(
    students.router,
    prefix="/student",
    tags=["Students"],
    responses=ERROR_RESPONSES,
)
