"""
Registration of a user for an event.

- PENDING and CONFIRMED registrations both hold a seat; CANCELLED ones do not
- Both foreign keys cascade on delete, so removing a user or an event removes
  its registrations
- Partial unique index allows one active registration per (user, event) while
  keeping cancelled history rows
"""

import enum
import uuid

from sqlalchemy import Column, String, Uuid, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship

from event_registration.db.base import Base, TimestampMixin


class RegistrationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


ACTIVE_STATUSES = (RegistrationStatus.PENDING.value, RegistrationStatus.CONFIRMED.value)

_ACTIVE_WHERE = text("status IN ('PENDING', 'CONFIRMED')")


class Registration(Base, TimestampMixin):
    __tablename__ = "registrations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    status = Column(
        String(20),
        nullable=False,
        default=RegistrationStatus.PENDING.value,
        server_default=RegistrationStatus.PENDING.value,
    )
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=True, index=True)

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")

    __table_args__ = (
        CheckConstraint("status IN ('PENDING', 'CONFIRMED', 'CANCELLED')", name="check_registration_status"),
        # Covers the admission count: WHERE event_id = ? AND status IN (...)
        Index("ix_registrations_event_status", "event_id", "status"),
        Index(
            "uq_registrations_user_event_active",
            "user_id",
            "event_id",
            unique=True,
            postgresql_where=_ACTIVE_WHERE,
            sqlite_where=_ACTIVE_WHERE,
        ),
    )

    def __repr__(self) -> str:
        return f"<Registration(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"
