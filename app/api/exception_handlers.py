"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.errors import (
    DATE_CONFLICT,
    DUPLICATE_RESOURCE,
    NOT_FOUND,
    RESOURCE_IN_USE,
    VALIDATION_ERROR,
    DateConflictError,
    DomainValidationError,
    DuplicateResourceError,
    NotFoundError,
    ReferentialGuardError,
)
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: str, code: str, **extra) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DUPLICATE_RESOURCE,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def date_conflict_error_handler(_request: Request, exc: DateConflictError) -> JSONResponse:
    logger.info("Rejected link %s -> %s: %s", exc.metadata_id, exc.right_id, exc)
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DATE_CONFLICT,
        conflicting_ids=exc.conflicting_right_ids,
    )


def referential_guard_error_handler(
    _request: Request, exc: ReferentialGuardError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        RESOURCE_IN_USE,
        conflicting_ids=exc.referenced_by,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(DateConflictError, date_conflict_error_handler)
    app.add_exception_handler(ReferentialGuardError, referential_guard_error_handler)
