"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.schemas.auth import AuthResponse, AuthUser, UserLogin, UserRegister, UserResponse
from src.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    return auth_service.register(db, user_data.email, user_data.password)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    return auth_service.login(db, credentials.email, credentials.password)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
):
    """Get the identity carried by the current token."""
    return current_user
