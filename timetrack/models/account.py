"""SQLAlchemy model for registered user accounts."""

from __future__ import annotations

from sqlalchemy import JSON, Column, Integer, Text

from ..db.session import Base


class Account(Base):
    """Login credentials plus whatever profile fields the user registered with.

    ``uid`` carries a UNIQUE index so two concurrent registrations for the same
    name cannot both land.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    uid = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    profile = Column(JSON, nullable=False, default=dict)
    created_at = Column(Text, nullable=False)


__all__ = ["Account"]
