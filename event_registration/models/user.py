"""
User model with hashed password storage and a role used for admin checks.
"""

import enum
import uuid

from sqlalchemy import Column, String, Uuid, CheckConstraint
from sqlalchemy.orm import relationship

from event_registration.db.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(10), nullable=False, default=UserRole.USER.value, server_default=UserRole.USER.value)

    # Rows are removed by the ON DELETE CASCADE foreign key, not by the ORM
    registrations = relationship(
        "Registration",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'USER')", name="check_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
