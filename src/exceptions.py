"""Application error taxonomy.

Each error is an HTTPException so FastAPI renders it as ``{"detail": ...}``
with the matching status code wherever it is raised.
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Malformed or out-of-range input."""

    def __init__(self, detail: str = "Invalid data") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedError(HTTPException):
    """Missing, invalid or expired token, or failed credential check."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(HTTPException):
    """Authenticated, but not allowed to touch the resource."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """Duplicate registration. Reported as 400 to match the register contract."""

    def __init__(self, detail: str = "Email already registered") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InternalError(HTTPException):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
