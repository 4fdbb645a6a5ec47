"""ORM models for the travel expense engine."""

from travel_expense_engine.models.application import (
    BusinessTripApplication,
    ExpenseApplication,
    ExpenseCategory,
    ExpenseItem,
)
from travel_expense_engine.models.base import Base, TimestampMixin, UpdatedAtMixin, utcnow
from travel_expense_engine.models.regulation import RegulationStatus, TravelRegulation
from travel_expense_engine.models.user import UserProfile, UserRole

__all__ = [
    "Base",
    "BusinessTripApplication",
    "ExpenseApplication",
    "ExpenseCategory",
    "ExpenseItem",
    "RegulationStatus",
    "TimestampMixin",
    "TravelRegulation",
    "UpdatedAtMixin",
    "UserProfile",
    "UserRole",
    "utcnow",
]
