"""Business trip, expense application, and expense item models."""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from travel_expense_engine.models.base import Base, TimestampMixin, UpdatedAtMixin

APPLICATION_STATUSES = "('draft', 'pending', 'approved', 'rejected', 'returned')"


class ExpenseCategory(str, Enum):
    """Expense item categories."""

    TRANSPORTATION = "transportation"
    LODGING = "lodging"
    PER_DIEM = "per_diem"
    MISCELLANEOUS = "miscellaneous"


class ApprovalFieldsMixin(UpdatedAtMixin):
    """Owner, status and decision fields shared by both application types."""

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft", index=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approval_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    @declared_attr
    def user_id(cls) -> Mapped[UUID]:
        return mapped_column(
            ForeignKey("user_profiles.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def approver_id(cls) -> Mapped[UUID | None]:
        return mapped_column(
            ForeignKey("user_profiles.id", ondelete="SET NULL"),
            nullable=True,
        )


class BusinessTripApplication(Base, ApprovalFieldsMixin):
    """Business trip request with its estimated expense breakdown."""

    __tablename__ = "business_trip_applications"

    purpose: Mapped[str] = mapped_column(Text, nullable=False, default="")
    destination: Mapped[str] = mapped_column(String, nullable=False, default="")
    # Per-diem table the estimate was billed against
    travel_scope: Mapped[str] = mapped_column(String, nullable=False, default="domestic")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    estimated_daily_allowance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    estimated_transportation: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    estimated_accommodation: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    estimated_total: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        CheckConstraint(
            f"status IN {APPLICATION_STATUSES}",
            name="business_trip_applications_status_check",
        ),
        CheckConstraint("end_date >= start_date", name="business_trip_applications_dates_check"),
        CheckConstraint(
            "travel_scope IN ('domestic', 'overseas')",
            name="business_trip_applications_scope_check",
        ),
    )


class ExpenseApplication(Base, ApprovalFieldsMixin):
    """Expense reimbursement request made of line items.

    ``items_attached`` stays false between inserting the application row and
    writing its items, so an interrupted creation can be found and repaired.
    """

    __tablename__ = "expense_applications"

    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    items_attached: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(
            f"status IN {APPLICATION_STATUSES}",
            name="expense_applications_status_check",
        ),
        CheckConstraint("total_amount >= 0", name="expense_applications_total_check"),
    )

    # Relationships
    items: Mapped[list[ExpenseItem]] = relationship(
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ExpenseItem.created_at",
    )


class ExpenseItem(Base, TimestampMixin):
    """Single expense line owned by an expense application."""

    __tablename__ = "expense_items"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    expense_application_id: Mapped[UUID] = mapped_column(
        ForeignKey("expense_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    receipt_url: Mapped[str | None] = mapped_column(String, nullable=True)
    # {"tag": ..., "version": ..., "payload": ...}
    ocr_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON(none_as_null=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "category IN ('transportation', 'lodging', 'per_diem', 'miscellaneous')",
            name="expense_items_category_check",
        ),
        CheckConstraint("amount >= 0", name="expense_items_amount_check"),
    )

    # Relationships
    application: Mapped[ExpenseApplication] = relationship(back_populates="items")
