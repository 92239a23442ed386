"""
SmartNotesX Backend — Shared Schema Building Blocks
=====================================================

What:  The response envelope, pagination block, and the camelCase base model
       every request/response schema inherits from.
Why:   Every endpoint answers `{success, message?, data?, errors?}` with
       camelCase keys, so the convention lives in one place.

Envelope examples:
    {"success": true, "message": "Note uploaded successfully", "data": {...}}
    {"success": false, "message": "Validation failed",
     "errors": [{"field": "email", "message": "Please provide a valid email"}]}
"""

import math
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base for API models: snake_case in Python, camelCase on the wire.

    populate_by_name lets services build models with Python field names while
    clients send and receive camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FieldError(BaseModel):
    field: str
    message: str


class Pagination(BaseModel):
    total: int = Field(description="Rows matching the filters")
    page: int = Field(description="Current page (1-based)")
    pages: int = Field(description="ceil(total / limit)")
    limit: int = Field(description="Page size")

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, pages=math.ceil(total / limit), limit=limit)


class ApiResponse(BaseModel, Generic[T]):
    """Uniform response envelope. `data` and `errors` are omitted when unset."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    errors: Optional[List[FieldError]] = None


def envelope(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Serialize a success envelope: camelCase keys, unset members omitted.

    Null attributes inside `data` are dropped as well, so an absent optional
    field (description, resume, ...) simply does not appear in the JSON.
    """
    return ApiResponse(success=True, message=message, data=data).model_dump(
        by_alias=True,
        mode="json",
        exclude_none=True,
    )


def error_body(message: str, errors: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    response = ApiResponse(
        success=False,
        message=message,
        errors=[FieldError(**e) for e in errors] if errors else None,
    )
    return response.model_dump(mode="json", exclude_none=True)
