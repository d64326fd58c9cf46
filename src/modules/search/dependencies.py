# src/modules/search/dependencies.py

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.modules.courses.course_repository import CourseRepository
from src.modules.instructors.instructor_repository import InstructorRepository
from src.modules.search.search_service import SearchService

def build_search_service(session_factory: async_sessionmaker[AsyncSession]) -> SearchService:
    """
    Wire the search aggregator to its repositories. Called once at startup.
    """
    return SearchService(
        course_repository=CourseRepository(session_factory),
        instructor_repository=InstructorRepository(session_factory),
    )

def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service
