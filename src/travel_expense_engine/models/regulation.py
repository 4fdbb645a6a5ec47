"""Company travel regulation model."""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from travel_expense_engine.models.base import Base, UpdatedAtMixin


class RegulationStatus(str, Enum):
    """Travel regulation status values."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class TravelRegulation(Base, UpdatedAtMixin):
    """Per-company per-diem policy.

    ``domestic_allowance`` and ``overseas_allowance`` map a tier name
    (executive/manager/general) to a per-diem amount. At most one regulation
    per company is active at a time.
    """

    __tablename__ = "travel_regulations"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    company_id: Mapped[UUID | None] = mapped_column(nullable=True)
    company_name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    version: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=RegulationStatus.DRAFT.value
    )
    regulation_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )
    domestic_allowance: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    overseas_allowance: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    distance_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    created_by: Mapped[UUID | None] = mapped_column(
        ForeignKey("user_profiles.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'active', 'archived')",
            name="travel_regulations_status_check",
        ),
        CheckConstraint("distance_threshold >= 0", name="travel_regulations_distance_check"),
    )
