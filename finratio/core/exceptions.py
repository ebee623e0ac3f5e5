"""Errors raised by services and surfaced as HTTP responses."""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Missing, soft-deleted or inactive row (snapshot, ratio, transaction, hierarchy node)."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "You don't have permission to access this resource"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class ValidationError(HTTPException):
    """Caller-correctable input, such as a reversed or over-long evaluation window."""

    def __init__(self, detail: str = "Validation error"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
        )


class CatalogError(Exception):
    """The ratio catalog references hierarchy nodes that do not exist."""
