from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ApiEnvelope(BaseModel):
    """Uniform response body for every /api route."""

    success: bool = Field(description="Whether the operation succeeded")
    data: Optional[Any] = Field(default=None, description="Operation result")
    message: Optional[str] = Field(default=None, description="Human-readable summary")
    error: Optional[Any] = Field(default=None, description="Classified error details")
    errors: Optional[List[Dict[str, Any]]] = Field(default=None, description="Per-field validation errors")
    suggestion: Optional[str] = Field(default=None, description="Follow-up the caller can try")


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    return ApiEnvelope(success=True, data=data, message=message).model_dump(exclude_none=True)


def fail(
    message: str,
    *,
    error: Any = None,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    return ApiEnvelope(success=False, message=message, error=error, errors=errors).model_dump(exclude_none=True)
