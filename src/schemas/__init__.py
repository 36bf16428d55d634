"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, AuthUser, UserLogin, UserRegister, UserResponse
from src.schemas.board import (
    BoardResponse,
    CardCreate,
    CardResponse,
    CardUpdate,
    ColumnResponse,
    DeleteResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthUser",
    "AuthResponse",
    "BoardResponse",
    "ColumnResponse",
    "CardCreate",
    "CardUpdate",
    "CardResponse",
    "DeleteResponse",
]
