# src/modules/instructors/instructor_repository.py

from src.common.database.repository import TextSearchRepository
from src.models.models import Instructor

class InstructorRepository(TextSearchRepository[Instructor]):
    """Text lookup over instructors by name and department."""

    model = Instructor
    entity_name = "instructor"
    id_attribute = "ucinetid"
