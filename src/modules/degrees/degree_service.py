# src/modules/degrees/degree_service.py

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, func, true
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.common.errors import ConflictError
from src.models.models import Degree, DegreeDivision, Major, Minor, Specialization
from src.modules.degrees.schemas import DegreeSortField, SortOrder

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    DegreeSortField.NAME: Degree.name,
    DegreeSortField.DIVISION: Degree.division,
    DegreeSortField.CREATED_AT: Degree.created_at,
    DegreeSortField.UPDATED_AT: Degree.updated_at,
}

def _degree_filter(name: Optional[str] = None, division: Optional[DegreeDivision] = None):
    conditions = []
    if name:
        conditions.append(Degree.name.ilike(f"%{name}%"))
    if division:
        conditions.append(Degree.division == division)
    return and_(true(), *conditions)

async def get_degrees(
    db: AsyncSession,
    name: Optional[str] = None,
    division: Optional[DegreeDivision] = None,
    skip: int = 0,
    limit: int = 50,
    sort_by: DegreeSortField = DegreeSortField.NAME,
    sort_order: SortOrder = SortOrder.ASC,
) -> List[Degree]:
    """
    Retrieve degrees filtered by a name substring and/or division.

    Args:
        db (AsyncSession): The database session.
        name (Optional[str]): Case-insensitive substring of the degree name.
        division (Optional[DegreeDivision]): Undergraduate or Graduate.
        skip (int): Number of records to skip.
        limit (int): Maximum number of records to return.
        sort_by (DegreeSortField): Column to sort on.
        sort_order (SortOrder): asc or desc.

    Returns:
        List[Degree]: Matching degrees, ties broken by id.
    """
    column = _SORT_COLUMNS[sort_by]
    ordering = column.desc() if sort_order == SortOrder.DESC else column.asc()
    stmt = (
        select(Degree)
        .where(_degree_filter(name, division))
        .order_by(ordering, Degree.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return result.scalars().all()

async def count_degrees(
    db: AsyncSession,
    name: Optional[str] = None,
    division: Optional[DegreeDivision] = None,
) -> int:
    stmt = select(func.count()).select_from(Degree).where(_degree_filter(name, division))
    return (await db.execute(stmt)).scalar_one()

async def get_degree_by_id(degree_id: UUID, db: AsyncSession) -> Optional[Degree]:
    result = await db.execute(select(Degree).where(Degree.id == degree_id))
    return result.scalars().first()

async def create_degree(degree_data: dict, db: AsyncSession) -> Degree:
    """
    Create a new degree. Raises ConflictError when the name is already taken.
    """
    new_degree = Degree(
        name=degree_data["name"],
        division=degree_data["division"],
        description=degree_data.get("description"),
    )
    db.add(new_degree)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Degree with this name already exists.")
    await db.refresh(new_degree)
    logger.info("Degree created: %s (%s)", new_degree.name, new_degree.id)
    return new_degree

async def update_degree(degree_id: UUID, degree_data: dict, db: AsyncSession) -> Optional[Degree]:
    """
    Update an existing degree; None values are left unchanged.
    Returns None when the degree does not exist.
    """
    degree = await get_degree_by_id(degree_id, db)
    if not degree:
        return None
    for key, value in degree_data.items():
        if value is not None:
            setattr(degree, key, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Degree with this name already exists.")
    await db.refresh(degree)
    return degree

async def delete_degree(degree_id: UUID, db: AsyncSession) -> bool:
    degree = await get_degree_by_id(degree_id, db)
    if not degree:
        return False
    await db.delete(degree)
    await db.commit()
    logger.info("Degree deleted: %s", degree_id)
    return True

async def get_majors(degree_id: UUID, db: AsyncSession) -> List[Major]:
    result = await db.execute(select(Major).where(Major.degree_id == degree_id).order_by(Major.name))
    return result.scalars().all()

async def get_minors(degree_id: UUID, db: AsyncSession) -> List[Minor]:
    result = await db.execute(select(Minor).where(Minor.degree_id == degree_id).order_by(Minor.name))
    return result.scalars().all()

async def get_specializations(major_id: str, db: AsyncSession) -> List[Specialization]:
    result = await db.execute(
        select(Specialization).where(Specialization.major_id == major_id).order_by(Specialization.name)
    )
    return result.scalars().all()

# Batched lookups for the GraphQL loaders: parent id -> children, one query per batch.

async def get_majors_for_degrees(degree_ids: Sequence[UUID], db: AsyncSession) -> Dict[UUID, List[Major]]:
    result = await db.execute(select(Major).where(Major.degree_id.in_(degree_ids)).order_by(Major.name))
    grouped: Dict[UUID, List[Major]] = defaultdict(list)
    for major in result.scalars().all():
        grouped[major.degree_id].append(major)
    return grouped

async def get_minors_for_degrees(degree_ids: Sequence[UUID], db: AsyncSession) -> Dict[UUID, List[Minor]]:
    result = await db.execute(select(Minor).where(Minor.degree_id.in_(degree_ids)).order_by(Minor.name))
    grouped: Dict[UUID, List[Minor]] = defaultdict(list)
    for minor in result.scalars().all():
        grouped[minor.degree_id].append(minor)
    return grouped

async def get_specializations_for_majors(major_ids: Sequence[str], db: AsyncSession) -> Dict[str, List[Specialization]]:
    result = await db.execute(
        select(Specialization)
        .where(Specialization.major_id.in_(major_ids))
        .order_by(Specialization.name)
    )
    grouped: Dict[str, List[Specialization]] = defaultdict(list)
    for specialization in result.scalars().all():
        grouped[specialization.major_id].append(specialization)
    return grouped

async def get_specializations_for_degrees(
    degree_ids: Sequence[UUID], db: AsyncSession
) -> Dict[UUID, List[Specialization]]:
    stmt = (
        select(Major.degree_id, Specialization)
        .select_from(Specialization)
        .join(Major, Major.id == Specialization.major_id)
        .where(Major.degree_id.in_(degree_ids))
        .order_by(Specialization.name)
    )
    result = await db.execute(stmt)
    grouped: Dict[UUID, List[Specialization]] = defaultdict(list)
    for degree_id, specialization in result.all():
        grouped[degree_id].append(specialization)
    return grouped
