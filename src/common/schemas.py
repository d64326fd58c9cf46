# src/common/schemas.py

from typing import Generic, TypeVar
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")

class CamelModel(BaseModel):
    """Base for response models serialized with camelCase keys."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class ResponseEnvelope(BaseModel, Generic[T]):
    ok: bool = True
    data: T

class ErrorResponse(BaseModel):
    ok: bool = False
    message: str

class MessageResponse(BaseModel):
    message: str

def ok(data) -> dict:
    return {"ok": True, "data": data}
