"""SQLAlchemy models."""

from src.models.card import Card
from src.models.column import BoardColumn
from src.models.user import User

__all__ = [
    "User",
    "BoardColumn",
    "Card",
]
