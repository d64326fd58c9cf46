# src/modules/courses/course_repository.py

from src.common.database.repository import TextSearchRepository
from src.models.models import Course

class CourseRepository(TextSearchRepository[Course]):
    """Text lookup over courses ("COMPSCI 161 Design and Analysis of Algorithms")."""

    model = Course
    entity_name = "course"
