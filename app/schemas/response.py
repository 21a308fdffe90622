"""Global API response schema used by all endpoints."""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from app.core.enums import ApiResponseMessage

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Standard API response envelope for all endpoints.

    - status: 1 for success, 0 for error.
    - message: "success" when status=1, or error description when status=0.
    - data: optional payload; null for a not-found lookup or when there is nothing to return.
    """

    status: int  # 1 = success, 0 = error
    message: str
    data: Optional[T] = None


class FieldError(BaseModel):
    """One failing input constraint (location of the field and its message)."""

    loc: List[Any]
    message: str
    type: str


def success_response(
    data: Any = None, message: str = ApiResponseMessage.SUCCESS.value
) -> ApiResponse[Any]:
    """Build a successful API response (status=1)."""
    return ApiResponse(status=1, message=message, data=data)


def error_response(message: str, data: Any = None) -> ApiResponse[Any]:
    """Build an error API response (status=0)."""
    return ApiResponse(status=0, message=message, data=data)


def validation_error_response(errors: List[dict]) -> ApiResponse[Any]:
    """
    Build an error response from pydantic validation errors.

    The message is the first failing constraint's own message so the UI can
    show it as-is; every failing field is listed in data.errors.
    """
    items = [
        FieldError(loc=list(e.get("loc", ())), message=str(e.get("msg", "")), type=str(e.get("type", "")))
        for e in errors
    ]
    message = items[0].message if items else "Invalid request"
    return error_response(message, data={"errors": [i.model_dump() for i in items]})
