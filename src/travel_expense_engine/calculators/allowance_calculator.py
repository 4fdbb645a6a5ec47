"""Trip expense estimation from dates and a per-diem rate."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from travel_expense_engine.calculators.types import ExpenseEstimate
from travel_expense_engine.errors import OperationResult, ValidationError

# Fixed per-day transportation allowance, independent of the regulation
TRANSPORTATION_PER_DAY = Decimal("2000")
# Lodging is billed per night, i.e. days - 1
ACCOMMODATION_PER_NIGHT = Decimal("8000")


def _coerce_date(value: date | str | None, field_name: str) -> date | ValidationError:
    if value is None or value == "":
        return ValidationError(f"{field_name} is required", {field_name: "required"})
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return ValidationError(
            f"{field_name} is not a valid date: {value!r}",
            {field_name: "invalid date"},
        )


def trip_days(start_date: date, end_date: date) -> int:
    """Inclusive day count; a same-day trip is one day."""
    return (end_date - start_date).days + 1


def estimate(
    start_date: date | str | None,
    end_date: date | str | None,
    daily_rate: Decimal,
) -> OperationResult[ExpenseEstimate]:
    """Estimate daily allowance, transportation, accommodation and total.

    Pure and deterministic: identical inputs always give an identical
    estimate, so callers re-run it on every date or rate change instead of
    caching it.

    Args:
        start_date: First travel day (date or ISO string)
        end_date: Last travel day (date or ISO string)
        daily_rate: Per-diem for the traveler's tier and travel scope

    Returns:
        OperationResult carrying the ExpenseEstimate, or a ValidationError
        for a missing/unparsable date, an end date before the start date,
        or a rate that is not a finite, non-negative number.
    """
    start = _coerce_date(start_date, "start_date")
    if isinstance(start, ValidationError):
        return OperationResult.fail(start)
    end = _coerce_date(end_date, "end_date")
    if isinstance(end, ValidationError):
        return OperationResult.fail(end)

    if end < start:
        return OperationResult.fail(
            ValidationError(
                f"end_date {end.isoformat()} is before start_date {start.isoformat()}",
                {"end_date": "before start_date"},
            )
        )

    try:
        rate = Decimal(daily_rate)
    except (InvalidOperation, TypeError, ValueError):
        rate = None
    if rate is None or not rate.is_finite():
        return OperationResult.fail(
            ValidationError(
                f"daily rate is not a number: {daily_rate!r}",
                {"daily_rate": "invalid number"},
            )
        )
    if rate < 0:
        return OperationResult.fail(
            ValidationError("daily rate must not be negative", {"daily_rate": "negative"})
        )

    days = trip_days(start, end)
    daily_allowance = rate * days
    transportation = TRANSPORTATION_PER_DAY * days
    accommodation = ACCOMMODATION_PER_NIGHT * (days - 1) if days > 1 else Decimal("0")

    return OperationResult.ok(
        ExpenseEstimate(
            days=days,
            daily_allowance=daily_allowance,
            transportation=transportation,
            accommodation=accommodation,
            total=daily_allowance + transportation + accommodation,
        )
    )
