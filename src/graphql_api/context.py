# src/graphql_api/context.py

from typing import Awaitable, Callable, Dict, Hashable, List, Optional, Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from strawberry.dataloader import DataLoader
from strawberry.fastapi import BaseContext

from src.auth.dependencies import admin_key_scheme
from src.common.database.database import get_session_factory
from src.modules.courses import course_service
from src.modules.degrees import degree_service
from src.modules.instructors import instructor_service
from src.modules.search.dependencies import get_search_service
from src.modules.search.search_service import SearchService

BatchFetch = Callable[[Sequence[Hashable], AsyncSession], Awaitable[Dict[Hashable, List]]]

def grouped_loader(session_factory: async_sessionmaker[AsyncSession], fetch: BatchFetch) -> DataLoader:
    """
    DataLoader resolving parent keys to child lists with one query per batch.
    Each batch uses its own session since sibling loaders run concurrently.
    """
    async def load(keys: List[Hashable]) -> List[List]:
        async with session_factory() as db:
            grouped = await fetch(keys, db)
        return [grouped.get(key, []) for key in keys]
    return DataLoader(load_fn=load)

class GraphQLContext(BaseContext):
    """
    Per-request GraphQL context: services, the admin key sent with the
    request, and fresh loaders so cached rows never leak across requests.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        search_service: SearchService,
        admin_key: Optional[str] = None,
    ):
        super().__init__()
        self.session_factory = session_factory
        self.search_service = search_service
        self.admin_key = admin_key

        self.majors_by_degree = grouped_loader(session_factory, degree_service.get_majors_for_degrees)
        self.minors_by_degree = grouped_loader(session_factory, degree_service.get_minors_for_degrees)
        self.specializations_by_degree = grouped_loader(session_factory, degree_service.get_specializations_for_degrees)
        self.specializations_by_major = grouped_loader(session_factory, degree_service.get_specializations_for_majors)
        self.instructors_by_course = grouped_loader(session_factory, course_service.get_instructors_for_courses)
        self.courses_by_instructor = grouped_loader(session_factory, instructor_service.get_courses_for_instructors)

async def get_graphql_context(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    search_service: SearchService = Depends(get_search_service),
    admin_key: Optional[str] = Depends(admin_key_scheme),
) -> GraphQLContext:
    return GraphQLContext(session_factory, search_service, admin_key)
