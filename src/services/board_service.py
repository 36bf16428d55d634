"""Board queries and card mutations."""

import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Final

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.exceptions import ValidationError
from src.models.card import Card
from src.models.column import BoardColumn
from src.models.enums import UserRole

logger = logging.getLogger(__name__)


class _Unset(Enum):
    """Marker for a patch field the client did not send."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset.UNSET


@dataclass(frozen=True)
class CardPatch:
    """Partial update for a card.

    Every field is either UNSET (leave as is) or a new value. ``description``
    also accepts None, which clears it.
    """

    column_id: int | _Unset = UNSET
    title: str | _Unset = UNSET
    description: str | None | _Unset = UNSET
    order_index: int | _Unset = UNSET

    def changes(self) -> dict:
        """Fields that were provided, keyed by column name."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()


@dataclass
class Board:
    columns: list[BoardColumn]
    cards: list[Card]


class BoardService:
    """Service for reading the board and mutating cards.

    Each mutation is a single-row effect committed on its own. Concurrent
    updates to the same card are last-write-wins.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_board(self) -> Board:
        """Return all columns and all cards in display order."""
        columns = self.db.query(BoardColumn).order_by(BoardColumn.order_index.asc()).all()
        # id breaks ties so cards sharing an order_index keep a stable order
        cards = self.db.query(Card).order_by(Card.order_index.asc(), Card.id.asc()).all()
        return Board(columns=columns, cards=cards)

    def get_card(self, card_id: int) -> Card | None:
        return self.db.query(Card).filter(Card.id == card_id).first()

    def column_exists(self, column_id: int) -> bool:
        return (
            self.db.query(BoardColumn.id).filter(BoardColumn.id == column_id).first() is not None
        )

    def can_mutate_card(self, card_id: int, user_id: int, role: UserRole) -> bool:
        """Check whether a user may update or delete a card.

        Admins may mutate any card. Everyone else must own it. Ownership is
        read from the database on every call. Returns False for a missing card.
        """
        if role.can_mutate_any_card():
            return True

        row = self.db.query(Card.owner_id).filter(Card.id == card_id).first()
        if row is None:
            return False

        (owner_id,) = row
        return owner_id is not None and owner_id == user_id

    def create_card(
        self,
        column_id: int,
        title: str,
        description: str | None,
        owner_id: int,
    ) -> Card:
        """Append a new card to the end of a column."""
        if not self.column_exists(column_id):
            raise ValidationError(f"Column {column_id} does not exist")

        # Evaluated inside the INSERT so the position is taken from the
        # column's card set at insert time
        next_order_index = (
            select(func.coalesce(func.max(Card.order_index) + 1, 0))
            .where(Card.column_id == column_id)
            .scalar_subquery()
        )

        card = Card(
            column_id=column_id,
            title=title,
            description=description,
            order_index=next_order_index,
            owner_id=owner_id,
        )
        self.db.add(card)
        self.db.commit()
        self.db.refresh(card)

        logger.info(f"Card {card.id} created in column {column_id} by user {owner_id}")
        return card

    def update_card(self, card_id: int, patch: CardPatch) -> Card | None:
        """Merge a patch into a card. Returns None if the card does not exist."""
        if patch.is_empty:
            raise ValidationError("At least one field must be provided")

        card = self.get_card(card_id)
        if card is None:
            return None

        changes = patch.changes()
        if "column_id" in changes and not self.column_exists(changes["column_id"]):
            raise ValidationError(f"Column {changes['column_id']} does not exist")

        for name, value in changes.items():
            setattr(card, name, value)
        card.touch()

        self.db.commit()
        self.db.refresh(card)

        logger.info(f"Card {card_id} updated: {sorted(changes)}")
        return card

    def delete_card(self, card_id: int) -> bool:
        """Delete a card. Returns False when no row was affected."""
        deleted = self.db.query(Card).filter(Card.id == card_id).delete()
        self.db.commit()

        if deleted:
            logger.info(f"Card {card_id} deleted")
        return deleted > 0
