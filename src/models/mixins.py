"""Mixins for SQLAlchemy models."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, func


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def touch(self) -> None:
        """Mark the row as modified now, even if no other column changes."""
        self.updated_at = datetime.now(UTC)
