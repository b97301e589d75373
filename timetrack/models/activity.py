from __future__ import annotations

from sqlalchemy import JSON, Column, Index, Integer, Text

from ..db.session import Base


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (Index("ix_activities_username_date", "username", "date"),)

    id = Column(Integer, primary_key=True)
    username = Column(Text, nullable=False, index=True)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    # Free-form entry data (duration, description, category, ...).
    fields = Column(JSON, nullable=False, default=dict)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["Activity"]
