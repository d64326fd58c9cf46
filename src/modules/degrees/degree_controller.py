# src/modules/degrees/degree_controller.py

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import require_admin
from src.common.cache import production_cache
from src.common.config import settings
from src.common.database.database import get_db_session
from src.common.errors import NotFoundError
from src.common.schemas import ErrorResponse, MessageResponse, ResponseEnvelope, ok
from src.models.models import DegreeDivision
from src.modules.degrees import degree_service, schemas

router = APIRouter(
    prefix="/degrees",
    tags=["degrees"],
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)

catalog_cache = Depends(production_cache(settings.CATALOG_CACHE_MAX_AGE))

@router.get(
    "",
    response_model=ResponseEnvelope[schemas.DegreeListResponse],
    dependencies=[catalog_cache],
)
async def get_degrees(
    name: Optional[str] = None,
    division: Optional[DegreeDivision] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    sort_by: schemas.DegreeSortField = Query(schemas.DegreeSortField.NAME, alias="sortBy"),
    sort_order: schemas.SortOrder = Query(schemas.SortOrder.ASC, alias="sortOrder"),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Retrieve degrees, optionally filtered by name substring and division.
    """
    degrees = await degree_service.get_degrees(db, name, division, skip, limit, sort_by, sort_order)
    total_count = await degree_service.count_degrees(db, name, division)
    return ok({"degrees": degrees, "total_count": total_count})

@router.get(
    "/{degree_id}",
    response_model=ResponseEnvelope[schemas.DegreeResponse],
    responses={404: {"model": ErrorResponse}},
    dependencies=[catalog_cache],
)
async def get_degree(degree_id: UUID, db: AsyncSession = Depends(get_db_session)):
    degree = await degree_service.get_degree_by_id(degree_id, db)
    if not degree:
        raise NotFoundError(f"Degree '{degree_id}' not found")
    return ok(degree)

@router.get(
    "/{degree_id}/majors",
    response_model=ResponseEnvelope[List[schemas.MajorResponse]],
    responses={404: {"model": ErrorResponse}},
    dependencies=[catalog_cache],
)
async def get_degree_majors(degree_id: UUID, db: AsyncSession = Depends(get_db_session)):
    if not await degree_service.get_degree_by_id(degree_id, db):
        raise NotFoundError(f"Degree '{degree_id}' not found")
    return ok(await degree_service.get_majors(degree_id, db))

@router.get(
    "/{degree_id}/minors",
    response_model=ResponseEnvelope[List[schemas.MinorResponse]],
    responses={404: {"model": ErrorResponse}},
    dependencies=[catalog_cache],
)
async def get_degree_minors(degree_id: UUID, db: AsyncSession = Depends(get_db_session)):
    if not await degree_service.get_degree_by_id(degree_id, db):
        raise NotFoundError(f"Degree '{degree_id}' not found")
    return ok(await degree_service.get_minors(degree_id, db))

@router.get(
    "/majors/{major_id}/specializations",
    response_model=ResponseEnvelope[List[schemas.SpecializationResponse]],
    dependencies=[catalog_cache],
)
async def get_major_specializations(major_id: str, db: AsyncSession = Depends(get_db_session)):
    return ok(await degree_service.get_specializations(major_id, db))

@router.post(
    "",
    response_model=ResponseEnvelope[schemas.DegreeResponse],
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
    dependencies=[Depends(require_admin)],
)
async def create_degree(
    degree_data: schemas.DegreeCreateRequest,
    db: AsyncSession = Depends(get_db_session),
):
    degree = await degree_service.create_degree(degree_data.model_dump(), db)
    return ok(degree)

@router.put(
    "/{degree_id}",
    response_model=ResponseEnvelope[schemas.DegreeResponse],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    dependencies=[Depends(require_admin)],
)
async def update_degree(
    degree_id: UUID,
    degree_data: schemas.DegreeUpdateRequest,
    db: AsyncSession = Depends(get_db_session),
):
    degree = await degree_service.update_degree(degree_id, degree_data.model_dump(), db)
    if not degree:
        raise NotFoundError(f"Degree '{degree_id}' not found")
    return ok(degree)

@router.delete(
    "/{degree_id}",
    response_model=ResponseEnvelope[MessageResponse],
    responses={404: {"model": ErrorResponse}},
    dependencies=[Depends(require_admin)],
)
async def delete_degree(degree_id: UUID, db: AsyncSession = Depends(get_db_session)):
    deleted = await degree_service.delete_degree(degree_id, db)
    if not deleted:
        raise NotFoundError(f"Degree '{degree_id}' not found")
    return ok({"message": "Degree deleted successfully."})
