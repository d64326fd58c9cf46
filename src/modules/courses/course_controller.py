# src/modules/courses/course_controller.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.cache import production_cache
from src.common.config import settings
from src.common.errors import NotFoundError
from src.common.schemas import ErrorResponse, ResponseEnvelope, ok
from src.modules.courses import course_service, schemas
from src.common.database.database import get_db_session

router = APIRouter(
    prefix="/courses",
    tags=["courses"],
    dependencies=[Depends(production_cache(settings.CATALOG_CACHE_MAX_AGE))],
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

# GET /courses - Retrieve courses
@router.get("", response_model=ResponseEnvelope[List[schemas.CourseResponse]])
async def get_courses(
    department: Optional[str] = None,
    course_number: Optional[str] = Query(None, alias="courseNumber"),
    title: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Retrieve courses with optional filtering and pagination.

    Query Parameters:
    - **department**: Department code, e.g. `COMPSCI`.
    - **courseNumber**: Course number, e.g. `161`.
    - **title**: Substring of the course title.
    - **skip**: Number of records to skip for pagination.
    - **limit**: Maximum number of records to return.
    """
    courses = await course_service.get_courses(db, department, course_number, title, skip, limit)
    return ok(courses)

# GET /courses/{course_id} - Retrieve course details by ID
@router.get(
    "/{course_id}",
    response_model=ResponseEnvelope[schemas.CourseDetailResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_course(course_id: str, db: AsyncSession = Depends(get_db_session)):
    course = await course_service.get_course_by_id(course_id, db)
    if not course:
        raise NotFoundError(f"Course '{course_id}' not found")
    return ok(course)
