# src/modules/courses/course_service.py

from collections import defaultdict
from typing import Dict, List, Optional, Sequence
from sqlalchemy.future import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from src.models.models import Course, Instructor, course_instructors

# Retrieve courses
async def get_courses(
    db: AsyncSession,
    department: Optional[str] = None,
    course_number: Optional[str] = None,
    title: Optional[str] = None,
    skip: int = 0,
    limit: int = 10,
) -> List[Course]:
    """
    Retrieve courses from the database with optional filters and pagination.

    Args:
        db (AsyncSession): The database session.
        department (Optional[str]): Exact department code, e.g. "COMPSCI" (case-insensitive).
        course_number (Optional[str]): Exact course number, e.g. "161" (case-insensitive).
        title (Optional[str]): Substring of the course title (case-insensitive).
        skip (int): Number of records to skip (for pagination).
        limit (int): Maximum number of records to return.

    Returns:
        List[Course]: Courses ordered by id.
    """
    query = select(Course)
    if department:
        query = query.where(Course.department == department.upper())
    if course_number:
        query = query.where(Course.course_number == course_number.upper())
    if title:
        query = query.where(Course.title.ilike(f"%{title}%"))
    query = query.order_by(Course.id).offset(skip).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()

# Retrieve a single course with its instructors
async def get_course_by_id(course_id: str, db: AsyncSession) -> Optional[Course]:
    stmt = (
        select(Course)
        .where(Course.id == course_id.upper())
        .options(selectinload(Course.instructors))
    )
    result = await db.execute(stmt)
    return result.scalars().first()

async def get_instructors_for_courses(course_ids: Sequence[str], db: AsyncSession) -> Dict[str, List[Instructor]]:
    """
    Batch lookup used by the GraphQL loaders: course id -> instructors teaching it.
    """
    stmt = (
        select(course_instructors.c.course_id, Instructor)
        .select_from(course_instructors)
        .join(Instructor, Instructor.ucinetid == course_instructors.c.instructor_id)
        .where(course_instructors.c.course_id.in_(course_ids))
        .order_by(Instructor.ucinetid)
    )
    result = await db.execute(stmt)
    grouped: Dict[str, List[Instructor]] = defaultdict(list)
    for course_id, instructor in result.all():
        grouped[course_id].append(instructor)
    return grouped
