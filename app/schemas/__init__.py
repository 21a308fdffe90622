"""Pydantic schemas for requests and responses."""

from app.schemas.response import ApiResponse, error_response, success_response, validation_error_response

__all__ = ["ApiResponse", "error_response", "success_response", "validation_error_response"]
