"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import UserRole


class UserRegister(BaseModel):
    """User registration request."""

    email: str = Field(..., max_length=255)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("email")
    @classmethod
    def email_has_at_sign(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("Email must contain '@'")
        return value


class UserLogin(BaseModel):
    """User login request.

    No length rules on the password here: any wrong password is a 401, not a 400.
    """

    email: str = Field(..., max_length=255)
    password: str


class UserResponse(BaseModel):
    """Public identity of a user, as embedded in the token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: UserRole


class AuthUser(UserResponse):
    """Identity decoded from a verified bearer token."""


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    token: str
    user: UserResponse
