"""Tests for trip expense estimation."""

from datetime import date
from decimal import Decimal

import pytest

from travel_expense_engine.calculators.allowance_calculator import (
    ACCOMMODATION_PER_NIGHT,
    TRANSPORTATION_PER_DAY,
    estimate,
    trip_days,
)
from travel_expense_engine.errors import ValidationError


class TestEstimate:
    """Test the estimate breakdown."""

    def test_three_day_general_trip(self):
        """2024-06-10..12 at 5000/day gives the documented breakdown."""
        result = estimate(date(2024, 6, 10), date(2024, 6, 12), Decimal("5000"))

        assert result.success
        breakdown = result.data
        assert breakdown.days == 3
        assert breakdown.daily_allowance == Decimal("15000")
        assert breakdown.transportation == Decimal("6000")
        assert breakdown.accommodation == Decimal("16000")
        assert breakdown.total == Decimal("37000")

    def test_same_day_trip_has_no_accommodation(self):
        result = estimate(date(2024, 6, 10), date(2024, 6, 10), Decimal("5000"))

        assert result.data.days == 1
        assert result.data.daily_allowance == Decimal("5000")
        assert result.data.transportation == TRANSPORTATION_PER_DAY
        assert result.data.accommodation == Decimal("0")
        assert result.data.total == Decimal("7000")

    def test_two_day_trip_bills_one_night(self):
        result = estimate(date(2024, 6, 10), date(2024, 6, 11), Decimal("6000"))

        assert result.data.accommodation == ACCOMMODATION_PER_NIGHT
        assert result.data.total == Decimal("12000") + Decimal("4000") + Decimal("8000")

    def test_accepts_iso_strings(self):
        from_strings = estimate("2024-06-10", "2024-06-12", Decimal("5000"))
        from_dates = estimate(date(2024, 6, 10), date(2024, 6, 12), Decimal("5000"))

        assert from_strings.data == from_dates.data

    def test_spans_month_boundary(self):
        result = estimate(date(2024, 2, 28), date(2024, 3, 1), Decimal("5000"))

        # 2024 is a leap year: Feb 28, Feb 29, Mar 1
        assert result.data.days == 3

    def test_zero_rate_still_pays_transport_and_lodging(self):
        result = estimate(date(2024, 6, 10), date(2024, 6, 11), Decimal("0"))

        assert result.data.daily_allowance == Decimal("0")
        assert result.data.total == Decimal("4000") + Decimal("8000")

    def test_record_uses_estimated_columns(self):
        record = estimate(date(2024, 6, 10), date(2024, 6, 12), Decimal("5000")).data.to_record()

        assert record == {
            "estimated_daily_allowance": Decimal("15000"),
            "estimated_transportation": Decimal("6000"),
            "estimated_accommodation": Decimal("16000"),
            "estimated_total": Decimal("37000"),
        }

    def test_camel_case_breakdown(self):
        breakdown = estimate(date(2024, 6, 10), date(2024, 6, 10), Decimal("5000")).data.to_dict()

        assert set(breakdown) == {"dailyAllowance", "transportation", "accommodation", "total"}


class TestEstimateValidation:
    """Test rejected inputs."""

    def test_end_before_start_is_rejected(self):
        result = estimate(date(2024, 6, 12), date(2024, 6, 10), Decimal("5000"))

        assert not result.success
        assert isinstance(result.error, ValidationError)
        assert "end_date" in result.error.fields
        assert result.data is None

    @pytest.mark.parametrize(
        "start,end,field",
        [
            (None, date(2024, 6, 10), "start_date"),
            (date(2024, 6, 10), None, "end_date"),
            ("", "2024-06-10", "start_date"),
        ],
    )
    def test_missing_date_is_rejected(self, start, end, field):
        result = estimate(start, end, Decimal("5000"))

        assert result.error_kind == "validation_error"
        assert result.error.fields == {field: "required"}

    def test_unparsable_date_is_rejected(self):
        result = estimate("2024-06-10", "June 12th", Decimal("5000"))

        assert result.error_kind == "validation_error"
        assert result.error.fields == {"end_date": "invalid date"}

    def test_negative_rate_is_rejected(self):
        result = estimate(date(2024, 6, 10), date(2024, 6, 12), Decimal("-1"))

        assert result.error_kind == "validation_error"

    @pytest.mark.parametrize("rate", ["abc", "", "NaN", "Infinity", None])
    def test_non_numeric_rate_is_rejected(self, rate):
        result = estimate(date(2024, 6, 10), date(2024, 6, 12), rate)

        assert result.error_kind == "validation_error"
        assert result.error.fields == {"daily_rate": "invalid number"}

    def test_numeric_string_rate_is_accepted(self):
        result = estimate(date(2024, 6, 10), date(2024, 6, 12), "5000")

        assert result.success
        assert result.data.daily_allowance == Decimal("15000")


class TestTripDays:
    def test_inclusive_count(self):
        assert trip_days(date(2024, 6, 10), date(2024, 6, 10)) == 1
        assert trip_days(date(2024, 6, 10), date(2024, 6, 12)) == 3
        assert trip_days(date(2024, 12, 31), date(2025, 1, 1)) == 2
