# src/modules/search/search_service.py

import asyncio
import logging
from typing import Any, List, Mapping, Protocol, Sequence, Tuple, Union

import pydantic

from src.common.database.repository import ScoredMatch
from src.common.errors import ValidationError
from src.modules.courses.schemas import CourseResponse
from src.modules.instructors.schemas import InstructorResponse
from src.modules.search.schemas import (
    RESULT_TYPE_PRIORITY,
    CourseResult,
    InstructorResult,
    SearchQuery,
    SearchResponse,
    SearchResultType,
)

logger = logging.getLogger(__name__)

SearchResult = Union[CourseResult, InstructorResult]

class EntityRepository(Protocol):
    async def find_by_text(self, text: str, limit: int, offset: int = 0) -> Tuple[List[ScoredMatch], int]:
        ...

def build_search_query(data: Union[SearchQuery, Mapping[str, Any]]) -> SearchQuery:
    """
    Normalize raw transport input into a SearchQuery, raising ValidationError
    for input that cannot be searched.
    """
    if isinstance(data, SearchQuery):
        return data
    try:
        return SearchQuery.model_validate(data)
    except pydantic.ValidationError as exc:
        messages = [error["msg"].removeprefix("Value error, ") for error in exc.errors()]
        raise ValidationError("; ".join(messages)) from exc

def _course_result(match: ScoredMatch) -> CourseResult:
    course = CourseResponse.model_validate(match.entity).model_dump()
    return CourseResult(**course, score=match.score)

def _instructor_result(match: ScoredMatch) -> InstructorResult:
    instructor = InstructorResponse.model_validate(match.entity).model_dump()
    return InstructorResult(**instructor, score=match.score)

def result_id(item: SearchResult) -> str:
    if item.type == SearchResultType.COURSE:
        return item.id
    if item.type == SearchResultType.INSTRUCTOR:
        return item.ucinetid
    raise ValueError(f"Unknown search result type: {item.type!r}")

def ranking_key(item: SearchResult) -> tuple:
    """Score descending, then courses before instructors, then id ascending."""
    return (-item.score, RESULT_TYPE_PRIORITY[item.type], result_id(item))

class SearchService:
    """
    Fans a query out to the course and instructor repositories, tags each
    match with its result type and returns one ranked, paginated list.

    Stateless: one instance can serve any number of concurrent requests.
    """

    def __init__(self, course_repository: EntityRepository, instructor_repository: EntityRepository):
        self._repositories = {
            SearchResultType.COURSE: (course_repository, _course_result),
            SearchResultType.INSTRUCTOR: (instructor_repository, _instructor_result),
        }

    async def search(self, query: Union[SearchQuery, Mapping[str, Any]]) -> SearchResponse:
        query = build_search_query(query)
        requested = sorted(query.result_types, key=RESULT_TYPE_PRIORITY.__getitem__)

        # Every repository orders by the same key, so its first skip+take rows
        # are enough to build the requested window of the merged list. Both
        # bounds are clamped, which keeps the window within SEARCH_MAX_SKIP +
        # SEARCH_MAX_TAKE rows per repository.
        window = query.skip + query.take
        logger.debug(
            "Search %r over %s (skip=%d, take=%d)",
            query.query_text, [t.value for t in requested], query.skip, query.take,
        )

        lookups = await self._fan_out(query.query_text, requested, window)

        items: List[SearchResult] = []
        total_count = 0
        for result_type, (matches, match_count) in zip(requested, lookups):
            _, to_result = self._repositories[result_type]
            items.extend(to_result(match) for match in matches)
            total_count += match_count

        items.sort(key=ranking_key)
        page = items[query.skip:window]
        logger.debug("Search %r matched %d records, returning %d", query.query_text, total_count, len(page))
        return SearchResponse(items=page, total_count=total_count)

    async def _fan_out(
        self, text: str, result_types: Sequence[SearchResultType], limit: int
    ) -> List[Tuple[List[ScoredMatch], int]]:
        tasks = [
            asyncio.create_task(self._repositories[result_type][0].find_by_text(text, limit, 0))
            for result_type in result_types
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            # Fail fast: a failed (or cancelled) lookup cancels the others.
            for task in tasks:
                task.cancel()
            # Collect the other outcomes so no task exception goes unretrieved.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
