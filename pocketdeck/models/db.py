"""
SQLAlchemy ORM models for persistent storage.

Only user decks are persisted; the card catalog lives in memory.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DeckDB(Base):
    """
    A user's deck stored in the database.

    Listed per owner, most recently updated first.
    """

    __tablename__ = "decks"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    name: Mapped[str] = mapped_column(String(255))

    # [{"cardId": "A1-001", "count": 2}, ...]
    cards: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    notes: Mapped[str] = mapped_column(Text, default="")

    # Set explicitly on write so listing order has sub-second resolution
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    def __repr__(self) -> str:
        return f"<DeckDB(id={self.id}, user_id={self.user_id}, name={self.name})>"
