"""
AdoptMe Backend — Pet SQLAlchemy Model
========================================

What:  ORM model for the `pets` table, the only entity in the system.
Who:   Used by PetService for CRUD and by Alembic for schema management.

Table Design:
    - id: UUID generated on the Python side, so the record has its id
      before the INSERT is flushed. Stored with the portable `Uuid` type
      (native UUID on PostgreSQL, CHAR(32) on SQLite).
    - name / type / breed: free text, no length rules.
    - age: plain number, no range rule (negative ages are stored as given).
    - is_adopted: the single defaulted field.
    - created_at: internal, gives list queries a stable insertion order.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, Index, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from adoptme.database import Base


class Pet(Base):
    """A pet listed for adoption."""

    __tablename__ = "pets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String, nullable=False)

    # Free text, usually the species ("Dog", "Cat", ...)
    type: Mapped[str] = mapped_column(String, nullable=False)

    age: Mapped[float] = mapped_column(Float, nullable=False)

    breed: Mapped[str] = mapped_column(String, nullable=False)

    is_adopted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_pets_created_at", "created_at"),
        Index("idx_pets_is_adopted", "is_adopted"),
    )

    def __repr__(self) -> str:
        return (
            f"<Pet(id={self.id}, name='{self.name}', "
            f"is_adopted={self.is_adopted})>"
        )
