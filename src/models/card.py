"""Card model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Card(Base, TimestampMixin):
    """Card model for work items on the board."""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True, index=True)
    column_id = Column(Integer, ForeignKey("columns.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    # Legacy cards may have no owner; only admins can mutate those
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    column = relationship("BoardColumn", back_populates="cards")
    owner = relationship("User", backref="cards")
