# src/graphql_api/schema.py

from typing import List, Optional
from uuid import UUID

import pydantic
import strawberry
from strawberry.types import Info

from src.auth.dependencies import check_admin_key
from src.common.errors import NotFoundError, ValidationError
from src.graphql_api.context import GraphQLContext
from src.graphql_api.errors import translate_errors
from src.graphql_api.types import (
    Course,
    CoursesQuery,
    CreateDegreeInput,
    Degree,
    DegreesPage,
    DegreesQuery,
    DeleteResponse,
    Instructor,
    InstructorsQuery,
    SearchQueryInput,
    SearchResponse,
    UpdateDegreeInput,
    to_search_result_item,
)
from src.modules.courses import course_service
from src.modules.degrees import degree_service
from src.modules.degrees.schemas import DegreeCreateRequest, DegreeSortField, DegreeUpdateRequest, SortOrder
from src.modules.instructors import instructor_service

MAX_PAGE_SIZE = 100

def _page(limit: Optional[int], offset: Optional[int], default_limit: int) -> tuple[int, int]:
    limit = default_limit if limit is None else min(max(limit, 1), MAX_PAGE_SIZE)
    offset = 0 if offset is None else max(offset, 0)
    return offset, limit

def _degree_id(value: strawberry.ID) -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFoundError(f"Degree '{value}' not found")

def _validated(model: type[pydantic.BaseModel], data: dict) -> pydantic.BaseModel:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError("; ".join(error["msg"].removeprefix("Value error, ") for error in exc.errors()))

@strawberry.type
class Query:
    @strawberry.field(description="Search courses and instructors, ranked by relevance.")
    @translate_errors
    async def search(self, info: Info[GraphQLContext, None], query: SearchQueryInput) -> SearchResponse:
        response = await info.context.search_service.search(
            {
                "query_text": query.query_text,
                "result_types": query.result_types,
                "skip": query.skip,
                "take": query.take,
            }
        )
        return SearchResponse(
            items=[to_search_result_item(item) for item in response.items],
            total_count=response.total_count,
        )

    @strawberry.field(description="Retrieve a single course by its ID.")
    @translate_errors
    async def course(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> Course:
        async with info.context.session_factory() as db:
            course = await course_service.get_course_by_id(str(id), db)
        if not course:
            raise NotFoundError(f"Course '{id}' not found")
        return Course.from_model(course)

    @strawberry.field(description="Retrieve courses matching the given filters.")
    @translate_errors
    async def courses(self, info: Info[GraphQLContext, None], query: Optional[CoursesQuery] = None) -> List[Course]:
        query = query or CoursesQuery()
        skip, limit = _page(query.limit, query.offset, 10)
        async with info.context.session_factory() as db:
            courses = await course_service.get_courses(
                db, query.department, query.course_number, query.title, skip, limit
            )
        return [Course.from_model(course) for course in courses]

    @strawberry.field(description="Retrieve a single instructor by UCInetID.")
    @translate_errors
    async def instructor(self, info: Info[GraphQLContext, None], ucinetid: strawberry.ID) -> Instructor:
        async with info.context.session_factory() as db:
            instructor = await instructor_service.get_instructor_by_ucinetid(str(ucinetid), db)
        if not instructor:
            raise NotFoundError(f"Instructor '{ucinetid}' not found")
        return Instructor.from_model(instructor)

    @strawberry.field(description="Retrieve instructors matching the given filters.")
    @translate_errors
    async def instructors(
        self, info: Info[GraphQLContext, None], query: Optional[InstructorsQuery] = None
    ) -> List[Instructor]:
        query = query or InstructorsQuery()
        skip, limit = _page(query.limit, query.offset, 10)
        async with info.context.session_factory() as db:
            instructors = await instructor_service.get_instructors(db, query.name, query.department, skip, limit)
        return [Instructor.from_model(instructor) for instructor in instructors]

    @strawberry.field(description="Retrieve a single degree by its ID.")
    @translate_errors
    async def degree(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> Degree:
        async with info.context.session_factory() as db:
            degree = await degree_service.get_degree_by_id(_degree_id(id), db)
        if not degree:
            raise NotFoundError(f"Degree '{id}' not found")
        return Degree.from_model(degree)

    @strawberry.field(description="Retrieve a list of degrees based on query parameters.")
    @translate_errors
    async def degrees(self, info: Info[GraphQLContext, None], query: Optional[DegreesQuery] = None) -> DegreesPage:
        query = query or DegreesQuery()
        skip, limit = _page(query.limit, query.offset, 50)
        async with info.context.session_factory() as db:
            degrees = await degree_service.get_degrees(
                db,
                query.name,
                query.division,
                skip,
                limit,
                query.sort_by or DegreeSortField.NAME,
                query.sort_order or SortOrder.ASC,
            )
            total_count = await degree_service.count_degrees(db, query.name, query.division)
        return DegreesPage(degrees=[Degree.from_model(degree) for degree in degrees], total_count=total_count)

@strawberry.type
class Mutation:
    @strawberry.mutation(description="Create a new degree.")
    @translate_errors
    async def create_degree(self, info: Info[GraphQLContext, None], input: CreateDegreeInput) -> Degree:
        check_admin_key(info.context.admin_key)
        request = _validated(
            DegreeCreateRequest,
            {"name": input.name, "division": input.division, "description": input.description},
        )
        async with info.context.session_factory() as db:
            degree = await degree_service.create_degree(request.model_dump(), db)
        return Degree.from_model(degree)

    @strawberry.mutation(description="Update an existing degree by its ID.")
    @translate_errors
    async def update_degree(
        self, info: Info[GraphQLContext, None], id: strawberry.ID, input: UpdateDegreeInput
    ) -> Degree:
        check_admin_key(info.context.admin_key)
        request = _validated(
            DegreeUpdateRequest,
            {"name": input.name, "division": input.division, "description": input.description},
        )
        async with info.context.session_factory() as db:
            degree = await degree_service.update_degree(_degree_id(id), request.model_dump(), db)
        if not degree:
            raise NotFoundError(f"Degree '{id}' not found.")
        return Degree.from_model(degree)

    @strawberry.mutation(description="Delete a degree by its ID.")
    @translate_errors
    async def delete_degree(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> DeleteResponse:
        check_admin_key(info.context.admin_key)
        async with info.context.session_factory() as db:
            deleted = await degree_service.delete_degree(_degree_id(id), db)
        if not deleted:
            raise NotFoundError(f"Degree '{id}' not found.")
        return DeleteResponse(message="Degree deleted successfully.")

schema = strawberry.Schema(query=Query, mutation=Mutation)
