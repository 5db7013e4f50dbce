"""
Event model with a capacity limit.

- `capacity` is checked >= 1 at the DB level
- `version` is bumped by every admission and every update, so concurrent
  writers to the same event serialize on its row (see registration_service)
- Index on `date` for the default listing order
"""

import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Uuid, Index, CheckConstraint
from sqlalchemy.orm import relationship

from event_registration.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)

    version = Column(Integer, nullable=False, default=1, server_default="1")

    registrations = relationship(
        "Registration",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="check_event_capacity_positive"),
        Index("ix_events_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, capacity={self.capacity})>"
