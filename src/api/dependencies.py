"""FastAPI dependencies for authentication, services and realtime."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import Depends, Request, Response
from fastapi.routing import APIRoute
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from src.database import get_db
from src.schemas.auth import AuthUser
from src.services.auth import verify_token
from src.services.board_service import BoardService
from src.services.realtime import BoardNotifier

# auto_error=False so a missing header is reported as 401 by verify_token
security = HTTPBearer(auto_error=False)


def bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
    if scheme.lower() != "bearer" or not token:
        return None
    return token


class AuthenticatedRoute(APIRoute):
    """Route that rejects a request without a valid token before reading its body.

    FastAPI parses the JSON body before resolving dependencies, so a malformed
    body would otherwise be reported as 400 ahead of the missing token.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def authenticated_route_handler(request: Request) -> Response:
            verify_token(bearer_token(request))
            return await original_route_handler(request)

        return authenticated_route_handler


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthUser:
    """Get the current identity from the bearer token.

    No database lookup: the token's claims are trusted for the request.
    """
    token = credentials.credentials if credentials else None
    return verify_token(token)


def get_board_service(
    db: Annotated[Session, Depends(get_db)],
) -> BoardService:
    """Get board service with dependencies."""
    return BoardService(db)


def get_notifier(request: Request) -> BoardNotifier:
    """Get the notifier created by the application lifespan."""
    return request.app.state.notifier
