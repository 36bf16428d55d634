"""Board column model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base


class BoardColumn(Base):
    """Ordered bucket of cards. Seeded out-of-band, never edited through the API."""

    __tablename__ = "columns"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)

    # Relationships
    cards = relationship("Card", back_populates="column")
