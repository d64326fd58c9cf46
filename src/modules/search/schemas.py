# src/modules/search/schemas.py

from enum import Enum
from typing import Annotated, FrozenSet, List, Literal, Union

from pydantic import BaseModel, Field, field_validator

from src.common.config import settings
from src.common.schemas import CamelModel
from src.modules.courses.schemas import CourseResponse
from src.modules.instructors.schemas import InstructorResponse

class SearchResultType(str, Enum):
    COURSE = "course"
    INSTRUCTOR = "instructor"

# Tie-break rank between result types with equal scores
RESULT_TYPE_PRIORITY = {SearchResultType.COURSE: 0, SearchResultType.INSTRUCTOR: 1}

class SearchQuery(BaseModel):
    """
    Normalized search request. ``skip`` is clamped to [0, SEARCH_MAX_SKIP] and
    ``take`` to [1, SEARCH_MAX_TAKE] rather than rejected; only a blank query
    text is invalid.
    """

    query_text: str
    result_types: FrozenSet[SearchResultType] = frozenset(SearchResultType)
    skip: int = 0
    take: int = Field(default_factory=lambda: settings.SEARCH_DEFAULT_TAKE)

    @field_validator("query_text")
    def query_text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Search query must not be empty")
        return value

    @field_validator("result_types", mode="before")
    def default_result_types(cls, value):
        if not value:
            return frozenset(SearchResultType)
        return value

    @field_validator("skip", mode="before")
    def clamp_skip(cls, value):
        if value is None:
            return 0
        return min(max(0, int(value)), settings.SEARCH_MAX_SKIP)

    @field_validator("take", mode="before")
    def clamp_take(cls, value):
        if value is None:
            return settings.SEARCH_DEFAULT_TAKE
        return min(max(1, int(value)), settings.SEARCH_MAX_TAKE)

class CourseResult(CourseResponse):
    type: Literal[SearchResultType.COURSE] = SearchResultType.COURSE
    score: float

class InstructorResult(InstructorResponse):
    type: Literal[SearchResultType.INSTRUCTOR] = SearchResultType.INSTRUCTOR
    score: float

SearchResultItem = Annotated[Union[CourseResult, InstructorResult], Field(discriminator="type")]

class SearchResponse(CamelModel):
    items: List[SearchResultItem]
    total_count: int
