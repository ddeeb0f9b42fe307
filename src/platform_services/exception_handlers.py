"""Global exception handlers for standardized error responses.

Implements RFC 7807 Problem Details for HTTP APIs. Composition layer errors
carry their own status code; anything else becomes a 500.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from platform_services.core.logging import logger
from platform_services.domain.exceptions import PlatformServiceError
from platform_services.models.errors import ProblemDetail, ValidationErrorDetail


def _problem_response(problem: ProblemDetail) -> JSONResponse:
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
    )


async def platform_service_exception_handler(
    request: Request, exc: PlatformServiceError
) -> JSONResponse:  # noqa: ASYNC100
    """Handle composition layer errors with their declared status.

    Args:
        request: The FastAPI request object.
        exc: The PlatformServiceError that was raised.

    Returns:
        JSONResponse with ProblemDetail body.
    """
    logger.warning(
        f"{type(exc).__name__}: {exc.status_code} - {exc.detail} "
        f"({request.method} {request.url.path})"
    )

    return _problem_response(
        ProblemDetail(
            title=exc.title,
            status=exc.status_code,
            detail=exc.detail,
            instance=str(request.url.path),
            platform_index=exc.platform_index,
        )
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:  # noqa: ASYNC100
    """Handle request validation errors (e.g. an unknown platform key).

    Args:
        request: The FastAPI request object.
        exc: The RequestValidationError from Pydantic validation.

    Returns:
        JSONResponse with ProblemDetail body including validation errors.
    """
    logger.warning(f"Validation error: {len(exc.errors())} errors")

    errors = [
        ValidationErrorDetail(
            type=error["type"],
            loc=tuple(str(loc) for loc in error["loc"]),
            msg=error["msg"],
            input=error.get("input"),
        )
        for error in exc.errors()
    ]

    return _problem_response(
        ProblemDetail(
            title="Validation Error",
            status=422,
            detail=f"One or more validation errors occurred ({len(errors)} errors).",
            instance=str(request.url.path),
            errors=errors,
        )
    )


async def general_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:  # noqa: ASYNC100
    """Handle unexpected exceptions with 500 Internal Server Error.

    Args:
        request: The FastAPI request object.
        exc: The exception that was raised.

    Returns:
        JSONResponse with ProblemDetail body.
    """
    logger.exception(f"Unexpected error: {type(exc).__name__}")

    return _problem_response(
        ProblemDetail(
            title="Internal Server Error",
            status=500,
            detail="An unexpected error occurred. Please try again later.",
            instance=str(request.url.path),
        )
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register every handler on ``app``."""
    app.add_exception_handler(PlatformServiceError, platform_service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
