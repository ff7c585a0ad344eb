# app/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldError(BaseModel):
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[List[FieldError]] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    database: Dict[str, Any]
