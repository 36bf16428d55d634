"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.exceptions import ConflictError, InternalError, UnauthorizedError, ValidationError
from src.models.enums import UserRole
from src.models.user import User
from src.schemas.auth import AuthResponse, AuthUser, UserResponse

logger = logging.getLogger(__name__)
settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str, role: UserRole | str) -> str:
    """Create a JWT access token carrying the user's id, email and role."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "role": UserRole(role).value,
        "exp": expire,
    }
    try:
        return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    except JWTError as e:
        logger.error(f"Failed to sign access token: {e}")
        raise InternalError("Auth error") from e


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def verify_token(token: str | None) -> AuthUser:
    """Resolve a bearer token into the identity it carries.

    The identity is trusted as-is; a role change only takes effect once the
    user obtains a new token.
    """
    if not token:
        raise UnauthorizedError("Not authenticated")

    payload = decode_access_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid authentication credentials")

    try:
        return AuthUser(id=payload.get("sub"), email=payload.get("email"), role=payload.get("role"))
    except PydanticValidationError as e:
        logger.warning(f"Token with malformed claims rejected: {e.error_count()} error(s)")
        raise UnauthorizedError("Invalid authentication credentials") from e


def issue_auth_response(user: User) -> AuthResponse:
    """Build the token + public identity returned by register and login."""
    token = create_access_token(user.id, user.email, user.role)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, email: str, password: str, role: UserRole = UserRole.USER) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password)
    user = User(email=email, password_hash=hashed_password, role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register(db: Session, email: str, password: str) -> AuthResponse:
    """Register a new account with the default role and sign it in."""
    if "@" not in email:
        raise ValidationError("Invalid email")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if get_user_by_email(db, email):
        raise ConflictError()

    try:
        user = create_user(db, email, password)
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError() from e

    logger.info(f"Registered user {user.id}")
    return issue_auth_response(user)


def login(db: Session, email: str, password: str) -> AuthResponse:
    """Check credentials and issue a fresh token."""
    user = authenticate_user(db, email, password)
    if not user:
        logger.info("Login rejected: bad credentials")
        raise UnauthorizedError("Incorrect email or password")

    return issue_auth_response(user)
