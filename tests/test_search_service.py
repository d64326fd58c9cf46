"""
Unit tests for the search aggregator, using in-memory repositories.
"""

import asyncio
import gc

import pytest

from src.common.config import settings
from src.common.database.repository import ScoredMatch
from src.common.errors import RepositoryError, ValidationError
from src.models.models import Course, CourseLevel, Instructor
from src.modules.search.schemas import CourseResult, InstructorResult, SearchQuery, SearchResultType
from src.modules.search.search_service import SearchService, ranking_key

def make_course(course_id, title="Untitled"):
    department, _, number = course_id.partition(" ")
    return Course(
        id=course_id.replace(" ", ""),
        department=department,
        course_number=number,
        department_name="",
        school="",
        title=title,
        description=None,
        course_level=CourseLevel.UPPER_DIVISION,
        min_units=4.0,
        max_units=4.0,
    )

def make_instructor(ucinetid, name="Someone"):
    return Instructor(ucinetid=ucinetid, name=name, title=None, email=None, department="Computer Science")

class FakeRepository:
    """Returns pre-scored records in repository order (score desc, id asc)."""

    def __init__(self, scored, error=None):
        self.scored = sorted(scored, key=lambda pair: (-pair[1], pair[0].id))
        self.error = error
        self.calls = []

    async def find_by_text(self, text, limit, offset=0):
        self.calls.append((text, limit, offset))
        if self.error:
            raise self.error
        page = self.scored[offset:offset + limit]
        return [ScoredMatch(entity=entity, score=score) for entity, score in page], len(self.scored)

class SlowRepository:
    def __init__(self):
        self.cancelled = False

    async def find_by_text(self, text, limit, offset=0):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return [], 0

@pytest.fixture
def courses():
    return FakeRepository([
        (make_course("COMPSCI 161", "Design and Analysis of Algorithms"), 0.75),
        (make_course("COMPSCI 162", "Formal Languages and Automata"), 0.75),
        (make_course("COMPSCI 163", "Graph Algorithms"), 0.5),
        (make_course("COMPSCI 169", "Introduction to Optimization"), 0.25),
    ])

@pytest.fixture
def instructors():
    return FakeRepository([
        (make_instructor("eppstein", "David Eppstein"), 1.0),
        (make_instructor("mikes", "Michael Shindler"), 0.75),
        (make_instructor("kay", "Kalev Kask"), 0.5),
    ])

@pytest.fixture
def service(courses, instructors):
    return SearchService(courses, instructors)

@pytest.mark.asyncio
async def test_merges_both_types_in_ranking_order(service):
    response = await service.search({"query_text": "algorithms", "take": 10})

    assert [(item.type, item.score) for item in response.items] == [
        (SearchResultType.INSTRUCTOR, 1.0),
        (SearchResultType.COURSE, 0.75),
        (SearchResultType.COURSE, 0.75),
        (SearchResultType.INSTRUCTOR, 0.75),
        (SearchResultType.COURSE, 0.5),
        (SearchResultType.INSTRUCTOR, 0.5),
        (SearchResultType.COURSE, 0.25),
    ]
    assert [item.id for item in response.items if isinstance(item, CourseResult)] == [
        "COMPSCI161", "COMPSCI162", "COMPSCI163", "COMPSCI169",
    ]
    keys = [ranking_key(item) for item in response.items]
    assert keys == sorted(keys)

@pytest.mark.asyncio
async def test_total_count_is_sum_of_unpaginated_matches(service):
    response = await service.search({"query_text": "algorithms", "take": 2})

    assert len(response.items) == 2
    assert response.total_count == 7
    assert response.total_count >= len(response.items)

@pytest.mark.asyncio
@pytest.mark.parametrize("take", [1, 3, 5, 50])
async def test_never_returns_more_than_take(service, take):
    response = await service.search({"query_text": "a", "take": take})

    assert len(response.items) <= take

@pytest.mark.asyncio
async def test_pagination_windows_concatenate(service):
    first = await service.search({"query_text": "a", "skip": 0, "take": 2})
    second = await service.search({"query_text": "a", "skip": 2, "take": 2})
    whole = await service.search({"query_text": "a", "skip": 0, "take": 4})

    assert first.items + second.items == whole.items

@pytest.mark.asyncio
async def test_repositories_receive_the_merge_window(service, courses, instructors):
    await service.search({"query_text": "  graph  ", "skip": 3, "take": 2})

    assert courses.calls == [("graph", 5, 0)]
    assert instructors.calls == [("graph", 5, 0)]

@pytest.mark.asyncio
async def test_course_only_search_skips_instructors(service, instructors):
    response = await service.search({"query_text": "algorithms", "result_types": [SearchResultType.COURSE]})

    assert response.items
    assert not any(isinstance(item, InstructorResult) for item in response.items)
    assert response.total_count == 4
    assert instructors.calls == []

@pytest.mark.asyncio
async def test_empty_result_types_means_both(service):
    response = await service.search({"query_text": "algorithms", "result_types": []})

    assert {item.type for item in response.items} == {SearchResultType.COURSE, SearchResultType.INSTRUCTOR}

@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
async def test_blank_query_is_rejected_before_any_lookup(service, courses, instructors, text):
    with pytest.raises(ValidationError):
        await service.search({"query_text": text})

    assert courses.calls == []
    assert instructors.calls == []

@pytest.mark.asyncio
async def test_no_matches_is_an_empty_page():
    service = SearchService(FakeRepository([]), FakeRepository([]))

    response = await service.search({"query_text": "nothing matches this"})

    assert response.items == []
    assert response.total_count == 0

@pytest.mark.asyncio
async def test_tied_maximum_scores_rank_courses_first():
    courses = FakeRepository([
        (make_course("COMPSCI 161", "Design and Analysis of Algorithms"), 1.0),
        (make_course("COMPSCI 161A", "Algorithms Lab"), 1.0),
        (make_course("COMPSCI 161B", "Algorithms Seminar"), 1.0),
    ])
    instructors = FakeRepository([(make_instructor("shindler"), 1.0)])
    service = SearchService(courses, instructors)

    response = await service.search({
        "query_text": "COMPSCI 161",
        "result_types": [SearchResultType.COURSE, SearchResultType.INSTRUCTOR],
        "skip": 0,
        "take": 5,
    })

    assert len(response.items) == 4
    assert response.total_count == 4
    assert [item.type for item in response.items] == [SearchResultType.COURSE] * 3 + [SearchResultType.INSTRUCTOR]

def test_skip_and_take_are_clamped(monkeypatch):
    monkeypatch.setattr(settings, "SEARCH_MAX_TAKE", 25)

    assert SearchQuery(query_text="x", take=1000).take == 25
    assert SearchQuery(query_text="x", take=0).take == 1
    assert SearchQuery(query_text="x", take=-3).take == 1
    assert SearchQuery(query_text="x", skip=-5).skip == 0
    assert SearchQuery(query_text="x").take == settings.SEARCH_DEFAULT_TAKE
    assert SearchQuery(query_text=" x ").query_text == "x"

@pytest.mark.asyncio
async def test_repository_failure_fails_the_whole_search(courses):
    service = SearchService(courses, FakeRepository([], error=RepositoryError("instructor")))

    with pytest.raises(RepositoryError):
        await service.search({"query_text": "algorithms"})

@pytest.mark.asyncio
async def test_repository_failure_cancels_pending_lookup():
    slow = SlowRepository()
    service = SearchService(FakeRepository([], error=RepositoryError("course")), slow)

    with pytest.raises(RepositoryError):
        await service.search({"query_text": "algorithms"})
    await asyncio.sleep(0)

    assert slow.cancelled

@pytest.mark.asyncio
async def test_both_lookups_failing_leaves_no_unretrieved_task_errors():
    loop = asyncio.get_running_loop()
    reported = []
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(lambda _, context: reported.append(context.get("message", "")))
    service = SearchService(
        FakeRepository([], error=RepositoryError("course")),
        FakeRepository([], error=RepositoryError("instructor")),
    )

    try:
        with pytest.raises(RepositoryError):
            await service.search({"query_text": "algorithms"})
        gc.collect()
    finally:
        loop.set_exception_handler(previous_handler)

    assert not [message for message in reported if "never retrieved" in message]

def test_skip_is_clamped_to_the_configured_maximum(monkeypatch):
    monkeypatch.setattr(settings, "SEARCH_MAX_SKIP", 50)

    assert SearchQuery(query_text="x", skip=2**63).skip == 50
    assert SearchQuery(query_text="x", skip=10**19).skip == 50
    assert SearchQuery(query_text="x", skip=50).skip == 50

def test_default_take_follows_current_settings(monkeypatch):
    monkeypatch.setattr(settings, "SEARCH_DEFAULT_TAKE", 7)

    assert SearchQuery(query_text="x").take == 7

@pytest.mark.asyncio
async def test_deep_skip_bounds_the_repository_window(service, courses, instructors, monkeypatch):
    monkeypatch.setattr(settings, "SEARCH_MAX_SKIP", 20)

    response = await service.search({"query_text": "a", "skip": 10**19, "take": 5})

    assert response.items == []
    assert response.total_count == 7
    assert courses.calls == [("a", 25, 0)]
    assert instructors.calls == [("a", 25, 0)]
