"""Monthly totals of approved applications."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from decimal import Decimal
from uuid import UUID

from travel_expense_engine.errors import OperationResult, ValidationError
from travel_expense_engine.models import BusinessTripApplication, ExpenseApplication
from travel_expense_engine.services.state_machine import ApplicationStatus
from travel_expense_engine.services.store import RecordStore


@dataclass(frozen=True)
class MonthlyTotals:
    """Approved amounts and counts for one user and month."""

    business_trip_total: Decimal
    expense_total: Decimal
    business_trip_count: int
    expense_count: int

    @property
    def grand_total(self) -> Decimal:
        return self.business_trip_total + self.expense_total

    def to_dict(self) -> dict[str, Decimal | int]:
        return {
            "businessTripTotal": self.business_trip_total,
            "expenseTotal": self.expense_total,
            "grandTotal": self.grand_total,
            "businessTripCount": self.business_trip_count,
            "expenseCount": self.expense_count,
        }


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class PeriodStatisticsService:
    """Aggregates approved applications into period totals.

    Trips and expenses are dated differently: a trip belongs to every month
    its travel period overlaps, an expense to the month it was filed in.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def monthly_totals(
        self, user_id: UUID, year: int, month: int
    ) -> OperationResult[MonthlyTotals]:
        """Totals of a user's approved trips and expenses for one month."""
        if not 1 <= month <= 12:
            return OperationResult.fail(
                ValidationError(f"month must be between 1 and 12, got {month}", {"month": "out of range"})
            )
        if not 1 <= year <= 9999:
            return OperationResult.fail(
                ValidationError(f"year out of range: {year}", {"year": "out of range"})
            )

        first_day, last_day = month_bounds(year, month)
        approved = ApplicationStatus.APPROVED.value

        trips = await self.store.list(
            BusinessTripApplication,
            BusinessTripApplication.user_id == user_id,
            BusinessTripApplication.status == approved,
            BusinessTripApplication.start_date <= last_day,
            BusinessTripApplication.end_date >= first_day,
        )
        if not trips.success:
            return OperationResult.fail(trips.error)

        filed_from = datetime.combine(first_day, time.min, tzinfo=UTC)
        filed_until = datetime.combine(last_day, time.max, tzinfo=UTC)
        expenses = await self.store.list(
            ExpenseApplication,
            ExpenseApplication.user_id == user_id,
            ExpenseApplication.status == approved,
            ExpenseApplication.created_at >= filed_from,
            ExpenseApplication.created_at <= filed_until,
        )
        if not expenses.success:
            return OperationResult.fail(expenses.error)

        return OperationResult.ok(
            MonthlyTotals(
                business_trip_total=sum(
                    (trip.estimated_total or Decimal("0") for trip in trips.data), Decimal("0")
                ),
                expense_total=sum(
                    (expense.total_amount or Decimal("0") for expense in expenses.data),
                    Decimal("0"),
                ),
                business_trip_count=len(trips.data),
                expense_count=len(expenses.data),
            )
        )
