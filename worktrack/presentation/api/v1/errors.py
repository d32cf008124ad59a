"""Mapping of domain errors to HTTP responses"""
from fastapi import HTTPException, status

from worktrack.domain.errors import (
    CircularReferenceError,
    DependencyCycleError,
    DependencyExistsError,
    DomainError,
    NotFoundError,
    OverlappingPeriodError,
    ProjectNameExistsError,
    TagExistsError,
)

CONFLICT_ERRORS = (
    CircularReferenceError,
    DependencyCycleError,
    DependencyExistsError,
    OverlappingPeriodError,
    ProjectNameExistsError,
    TagExistsError,
)


def to_http_exception(error: DomainError) -> HTTPException:
    """Not found -> 404, conflicts with existing data -> 409, anything else -> 400"""
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, CONFLICT_ERRORS):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(error))
