# src/modules/degrees/schemas.py

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID
from pydantic import BaseModel, field_validator

from src.common.schemas import CamelModel
from src.models.models import DegreeDivision

class DegreeSortField(str, Enum):
    NAME = "name"
    DIVISION = "division"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"

class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

class DegreeResponse(CamelModel):
    id: UUID
    name: str
    division: DegreeDivision
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class MajorResponse(CamelModel):
    id: str
    degree_id: UUID
    name: str
    code: str
    requirements: Optional[Any] = None

class MinorResponse(CamelModel):
    id: str
    degree_id: UUID
    name: str
    requirements: Optional[Any] = None

class SpecializationResponse(CamelModel):
    id: str
    major_id: str
    name: str
    requirements: Optional[Any] = None

class DegreeCreateRequest(BaseModel):
    name: str
    division: DegreeDivision
    description: Optional[str] = None

    @field_validator("name")
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

class DegreeUpdateRequest(BaseModel):
    name: Optional[str] = None
    division: Optional[DegreeDivision] = None
    description: Optional[str] = None

    @field_validator("name")
    def name_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be empty")
        return value

class DegreeListResponse(CamelModel):
    degrees: list[DegreeResponse]
    total_count: int
