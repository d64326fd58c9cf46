# src/graphql_api/types.py

from typing import Annotated, List, Optional, Union
from uuid import UUID

import strawberry
from strawberry.scalars import JSON
from strawberry.types import Info

from src.graphql_api.context import GraphQLContext
from src.models import models
from src.modules.degrees.schemas import DegreeSortField, SortOrder
from src.modules.search import schemas as search_schemas

CourseLevel = strawberry.enum(models.CourseLevel)
DegreeDivision = strawberry.enum(models.DegreeDivision)
SearchResultType = strawberry.enum(search_schemas.SearchResultType)
DegreeSortFieldEnum = strawberry.enum(DegreeSortField, name="DegreeSortField")
SortOrderEnum = strawberry.enum(SortOrder, name="SortOrder")

@strawberry.type(description="A course in the catalog.")
class Course:
    id: strawberry.ID
    department: str
    course_number: str
    department_name: str
    school: str
    title: str
    course_level: CourseLevel
    min_units: float
    max_units: float
    description: Optional[str] = None

    @classmethod
    def from_model(cls, course: models.Course) -> "Course":
        return cls(
            id=course.id,
            department=course.department,
            course_number=course.course_number,
            department_name=course.department_name,
            school=course.school,
            title=course.title,
            course_level=course.course_level,
            min_units=course.min_units,
            max_units=course.max_units,
            description=course.description,
        )

    @strawberry.field
    async def instructors(self, info: Info[GraphQLContext, None]) -> List["Instructor"]:
        rows = await info.context.instructors_by_course.load(self.id)
        return [Instructor.from_model(row) for row in rows]

@strawberry.type(description="An instructor, identified by UCInetID.")
class Instructor:
    ucinetid: strawberry.ID
    name: str
    department: str
    title: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_model(cls, instructor: models.Instructor) -> "Instructor":
        return cls(
            ucinetid=instructor.ucinetid,
            name=instructor.name,
            department=instructor.department,
            title=instructor.title,
            email=instructor.email,
        )

    @strawberry.field
    async def courses(self, info: Info[GraphQLContext, None]) -> List[Course]:
        rows = await info.context.courses_by_instructor.load(self.ucinetid)
        return [Course.from_model(row) for row in rows]

@strawberry.type(description="A course matched by a search, with its relevance score.")
class CourseResult(Course):
    type: SearchResultType = SearchResultType.COURSE
    score: float = 0.0

    @classmethod
    def from_result(cls, result: search_schemas.CourseResult) -> "CourseResult":
        return cls(**result.model_dump())

@strawberry.type(description="An instructor matched by a search, with its relevance score.")
class InstructorResult(Instructor):
    type: SearchResultType = SearchResultType.INSTRUCTOR
    score: float = 0.0

    @classmethod
    def from_result(cls, result: search_schemas.InstructorResult) -> "InstructorResult":
        return cls(**result.model_dump())

SearchResultItem = Annotated[Union[CourseResult, InstructorResult], strawberry.union("SearchResultItem")]

def to_search_result_item(result: search_schemas.SearchResultItem) -> SearchResultItem:
    if result.type == search_schemas.SearchResultType.COURSE:
        return CourseResult.from_result(result)
    if result.type == search_schemas.SearchResultType.INSTRUCTOR:
        return InstructorResult.from_result(result)
    raise ValueError(f"Unknown search result type: {result.type!r}")

@strawberry.type
class SearchResponse:
    items: List[SearchResultItem]
    total_count: int

@strawberry.input
class SearchQueryInput:
    query_text: str
    result_types: Optional[List[SearchResultType]] = None
    skip: Optional[int] = None
    take: Optional[int] = None

@strawberry.type
class Specialization:
    id: strawberry.ID
    major_id: strawberry.ID
    name: str
    requirements: Optional[JSON] = None

    @classmethod
    def from_model(cls, specialization: models.Specialization) -> "Specialization":
        return cls(
            id=specialization.id,
            major_id=specialization.major_id,
            name=specialization.name,
            requirements=specialization.requirements,
        )

@strawberry.type(description="Represents a major within a degree.")
class Major:
    id: strawberry.ID
    degree_id: strawberry.ID
    name: str
    code: str
    requirements: Optional[JSON] = None

    @classmethod
    def from_model(cls, major: models.Major) -> "Major":
        return cls(
            id=major.id,
            degree_id=str(major.degree_id),
            name=major.name,
            code=major.code,
            requirements=major.requirements,
        )

    @strawberry.field
    async def specializations(self, info: Info[GraphQLContext, None]) -> List[Specialization]:
        rows = await info.context.specializations_by_major.load(self.id)
        return [Specialization.from_model(row) for row in rows]

@strawberry.type(description="Represents a minor within a degree.")
class Minor:
    id: strawberry.ID
    degree_id: strawberry.ID
    name: str
    requirements: Optional[JSON] = None

    @classmethod
    def from_model(cls, minor: models.Minor) -> "Minor":
        return cls(
            id=minor.id,
            degree_id=str(minor.degree_id),
            name=minor.name,
            requirements=minor.requirements,
        )

@strawberry.type(description="Represents an academic degree with detailed information.")
class Degree:
    id: strawberry.ID
    name: str
    division: DegreeDivision
    created_at: str
    description: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_model(cls, degree: models.Degree) -> "Degree":
        return cls(
            id=str(degree.id),
            name=degree.name,
            division=degree.division,
            created_at=degree.created_at.isoformat(),
            description=degree.description,
            updated_at=degree.updated_at.isoformat() if degree.updated_at else None,
        )

    @strawberry.field
    async def majors(self, info: Info[GraphQLContext, None]) -> List[Major]:
        rows = await info.context.majors_by_degree.load(UUID(self.id))
        return [Major.from_model(row) for row in rows]

    @strawberry.field
    async def minors(self, info: Info[GraphQLContext, None]) -> List[Minor]:
        rows = await info.context.minors_by_degree.load(UUID(self.id))
        return [Minor.from_model(row) for row in rows]

    @strawberry.field
    async def specializations(self, info: Info[GraphQLContext, None]) -> List[Specialization]:
        rows = await info.context.specializations_by_degree.load(UUID(self.id))
        return [Specialization.from_model(row) for row in rows]

@strawberry.type
class DegreesPage:
    degrees: List[Degree]
    total_count: int

@strawberry.input(description="Input type for querying degrees.")
class DegreesQuery:
    name: Optional[str] = None
    division: Optional[DegreeDivision] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    sort_by: Optional[DegreeSortFieldEnum] = None
    sort_order: Optional[SortOrderEnum] = None

@strawberry.input
class CoursesQuery:
    department: Optional[str] = None
    course_number: Optional[str] = None
    title: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

@strawberry.input
class InstructorsQuery:
    name: Optional[str] = None
    department: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

@strawberry.input(description="Input type for creating a new degree.")
class CreateDegreeInput:
    name: str
    division: DegreeDivision
    description: Optional[str] = None

@strawberry.input(description="Input type for updating an existing degree.")
class UpdateDegreeInput:
    name: Optional[str] = None
    division: Optional[DegreeDivision] = None
    description: Optional[str] = None

@strawberry.type(description="Represents the response after a delete operation.")
class DeleteResponse:
    message: str
