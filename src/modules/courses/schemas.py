# src/modules/courses/schemas.py

from typing import List, Optional

from src.common.schemas import CamelModel
from src.models.models import CourseLevel

class InstructorPreview(CamelModel):
    ucinetid: str
    name: str
    title: Optional[str] = None

class CourseResponse(CamelModel):
    id: str
    department: str
    course_number: str
    department_name: str
    school: str
    title: str
    description: Optional[str] = None
    course_level: CourseLevel
    min_units: float
    max_units: float

class CourseDetailResponse(CourseResponse):
    instructors: List[InstructorPreview] = []
