"""Board and card API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    AuthenticatedRoute,
    get_board_service,
    get_current_user,
    get_notifier,
)
from src.exceptions import ForbiddenError, NotFoundError
from src.schemas.auth import AuthUser
from src.schemas.board import (
    BoardResponse,
    CardCreate,
    CardResponse,
    CardUpdate,
    DeleteResponse,
)
from src.services.board_service import BoardService
from src.services.realtime import BoardNotifier

logger = logging.getLogger(__name__)
router = APIRouter(tags=["board"], route_class=AuthenticatedRoute)


def ensure_can_mutate(service: BoardService, card_id: int, user: AuthUser) -> None:
    """Raise 404 for a missing card and 403 for a card the user may not touch."""
    if service.can_mutate_card(card_id, user.id, user.role):
        return

    if service.get_card(card_id) is None:
        raise NotFoundError("Card not found")

    logger.info(f"User {user.id} denied mutation of card {card_id}")
    raise ForbiddenError()


@router.get("/board", response_model=BoardResponse)
def get_board(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    service: Annotated[BoardService, Depends(get_board_service)],
):
    """Get every column and every card."""
    board = service.get_board()
    return BoardResponse.model_validate(board)


@router.post("/cards", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
def create_card(
    card_data: CardCreate,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    service: Annotated[BoardService, Depends(get_board_service)],
    notifier: Annotated[BoardNotifier, Depends(get_notifier)],
):
    """Create a card at the end of a column, owned by the caller."""
    card = service.create_card(
        card_data.column_id,
        card_data.title,
        card_data.description,
        current_user.id,
    )
    notifier.board_changed()
    return card


@router.patch("/cards/{card_id}", response_model=CardResponse)
def update_card(
    card_id: int,
    card_data: CardUpdate,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    service: Annotated[BoardService, Depends(get_board_service)],
    notifier: Annotated[BoardNotifier, Depends(get_notifier)],
):
    """Partially update a card. Only the owner or an admin may do this."""
    ensure_can_mutate(service, card_id, current_user)

    card = service.update_card(card_id, card_data.to_patch())
    if card is None:
        raise NotFoundError("Card not found")

    notifier.board_changed()
    return card


@router.delete("/cards/{card_id}", response_model=DeleteResponse)
def delete_card(
    card_id: int,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    service: Annotated[BoardService, Depends(get_board_service)],
    notifier: Annotated[BoardNotifier, Depends(get_notifier)],
):
    """Delete a card. Only the owner or an admin may do this."""
    ensure_can_mutate(service, card_id, current_user)

    if not service.delete_card(card_id):
        raise NotFoundError("Card not found")

    notifier.board_changed()
    return DeleteResponse()
