"""
Models package.

Contains shared Pydantic models used by the FastAPI host integration.
"""

from platform_services.models.errors import ProblemDetail, ValidationErrorDetail

__all__ = [
    "ProblemDetail",
    "ValidationErrorDetail",
]
