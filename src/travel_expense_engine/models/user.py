"""User profile model supplied by the identity collaborator."""

from __future__ import annotations

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from travel_expense_engine.models.base import Base, UpdatedAtMixin


class UserRole(str, Enum):
    """User role values."""

    USER = "user"
    APPROVER = "approver"
    ADMIN = "admin"


class UserProfile(Base, UpdatedAtMixin):
    """Employee profile: identity, company and free-text position."""

    __tablename__ = "user_profiles"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    full_name: Mapped[str | None] = mapped_column(String, nullable=True)
    company_name: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default=UserRole.USER.value)

    __table_args__ = (
        CheckConstraint(
            "role IN ('user', 'approver', 'admin')",
            name="user_profiles_role_check",
        ),
    )
