# src/modules/instructors/instructor_service.py

from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from src.models.models import Course, Instructor, course_instructors

async def get_instructors(
    db: AsyncSession,
    name: Optional[str] = None,
    department: Optional[str] = None,
    skip: int = 0,
    limit: int = 10,
) -> List[Instructor]:
    """
    Retrieve instructors, optionally filtered by a name substring and/or department.
    """
    query = select(Instructor)
    if name:
        query = query.where(Instructor.name.ilike(f"%{name}%"))
    if department:
        query = query.where(Instructor.department.ilike(department))
    query = query.order_by(Instructor.ucinetid).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()

async def get_instructor_by_ucinetid(ucinetid: str, db: AsyncSession) -> Optional[Instructor]:
    """
    Retrieve a single instructor, with the courses they teach.
    """
    stmt = (
        select(Instructor)
        .where(Instructor.ucinetid == ucinetid.lower())
        .options(selectinload(Instructor.courses))
    )
    result = await db.execute(stmt)
    return result.scalars().first()

async def get_courses_for_instructors(ucinetids: Sequence[str], db: AsyncSession) -> Dict[str, List[Course]]:
    stmt = (
        select(course_instructors.c.instructor_id, Course)
        .select_from(course_instructors)
        .join(Course, Course.id == course_instructors.c.course_id)
        .where(course_instructors.c.instructor_id.in_(ucinetids))
        .order_by(Course.id)
    )
    result = await db.execute(stmt)
    grouped: Dict[str, List[Course]] = defaultdict(list)
    for ucinetid, course in result.all():
        grouped[ucinetid].append(course)
    return grouped
