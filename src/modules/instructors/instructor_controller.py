# src/modules/instructors/instructor_controller.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.cache import production_cache
from src.common.config import settings
from src.common.errors import NotFoundError
from src.common.schemas import ErrorResponse, ResponseEnvelope, ok
from src.modules.instructors import instructor_service, schemas
from src.common.database.database import get_db_session

router = APIRouter(
    prefix="/instructors",
    tags=["instructors"],
    dependencies=[Depends(production_cache(settings.CATALOG_CACHE_MAX_AGE))],
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

@router.get("", response_model=ResponseEnvelope[List[schemas.InstructorResponse]])
async def get_instructors(
    name: Optional[str] = None,
    department: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session)
):
    """
    Retrieve instructors filtered by name substring and/or department.
    """
    instructors = await instructor_service.get_instructors(db, name, department, skip, limit)
    return ok(instructors)

@router.get(
    "/{ucinetid}",
    response_model=ResponseEnvelope[schemas.InstructorDetailResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_instructor(ucinetid: str, db: AsyncSession = Depends(get_db_session)):
    instructor = await instructor_service.get_instructor_by_ucinetid(ucinetid, db)
    if not instructor:
        raise NotFoundError(f"Instructor '{ucinetid}' not found")
    return ok(instructor)
