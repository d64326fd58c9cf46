# src/modules/instructors/schemas.py

from typing import List, Optional

from src.common.schemas import CamelModel

class CoursePreview(CamelModel):
    id: str
    title: str
    department: str
    course_number: str

class InstructorResponse(CamelModel):
    ucinetid: str
    name: str
    title: Optional[str] = None
    email: Optional[str] = None
    department: str

class InstructorDetailResponse(InstructorResponse):
    courses: List[CoursePreview] = []
