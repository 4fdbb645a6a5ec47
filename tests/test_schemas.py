"""Tests for input schemas and error conversion."""

from datetime import date
from decimal import Decimal

from travel_expense_engine.errors import ValidationError
from travel_expense_engine.models import ExpenseCategory
from travel_expense_engine.schemas import (
    ExpenseApplicationCreate,
    ExpenseItemCreate,
    TravelRegulationCreate,
    TripApplicationCreate,
    TripApplicationUpdate,
    parse_input,
)


class TestTripSchemas:
    def test_valid_trip(self, trip_data):
        result = parse_input(TripApplicationCreate, trip_data)

        assert result.success
        assert result.data.start_date == date(2024, 6, 10)
        assert result.data.end_date == date(2024, 6, 12)

    def test_title_required(self, trip_data):
        trip_data["title"] = "   "

        result = parse_input(TripApplicationCreate, trip_data)

        assert isinstance(result.error, ValidationError)
        assert "title" in result.error.fields

    def test_dates_required(self, trip_data):
        del trip_data["end_date"]

        result = parse_input(TripApplicationCreate, trip_data)

        assert "end_date" in result.error.fields

    def test_end_before_start(self, trip_data):
        trip_data["end_date"] = "2024-06-01"

        result = parse_input(TripApplicationCreate, trip_data)

        assert result.error_kind == "validation_error"
        assert "end_date must not be before start_date" in result.error.message

    def test_update_rejects_unknown_fields(self):
        result = parse_input(TripApplicationUpdate, {"status": "approved"})

        assert "status" in result.error.fields

    def test_update_tracks_date_changes(self):
        assert TripApplicationUpdate(title="New").changes_dates is False
        assert TripApplicationUpdate(end_date=date(2024, 6, 13)).changes_dates is True

    def test_passes_schema_instances_through(self, trip_data):
        trip = TripApplicationCreate.model_validate(trip_data)

        assert parse_input(TripApplicationCreate, trip).data is trip


class TestExpenseSchemas:
    def test_total_is_sum_of_items(self, expense_items):
        request = ExpenseApplicationCreate.model_validate(
            {"title": "Osaka trip", "items": expense_items}
        )

        assert request.total_amount == Decimal("25000")

    def test_japanese_category_labels(self):
        for label, category in [
            ("交通費", ExpenseCategory.TRANSPORTATION),
            ("宿泊費", ExpenseCategory.LODGING),
            ("日当", ExpenseCategory.PER_DIEM),
            ("雑費", ExpenseCategory.MISCELLANEOUS),
            ("per-diem", ExpenseCategory.PER_DIEM),
        ]:
            item = ExpenseItemCreate(category=label, date=date(2024, 6, 1), amount=Decimal("1"))
            assert item.category == category

    def test_unknown_category(self):
        result = parse_input(
            ExpenseItemCreate, {"category": "entertainment", "date": "2024-06-01", "amount": 1}
        )

        assert "category" in result.error.fields

    def test_negative_amount(self):
        result = parse_input(
            ExpenseItemCreate, {"category": "lodging", "date": "2024-06-01", "amount": -5}
        )

        assert "amount" in result.error.fields

    def test_empty_items_rejected(self):
        result = parse_input(ExpenseApplicationCreate, {"title": "Nothing", "items": []})

        assert result.error_kind == "validation_error"
        assert "items" in result.error.fields

    def test_item_errors_are_keyed_by_path(self):
        result = parse_input(
            ExpenseApplicationCreate,
            {
                "title": "Bad item",
                "items": [{"category": "lodging", "date": "2024-06-01", "amount": -1}],
            },
        )

        assert "items.0.amount" in result.error.fields

    def test_recognition_payload_is_tagged(self, expense_items):
        item = ExpenseItemCreate.model_validate(expense_items[1])

        record = item.to_record()
        assert record["category"] == "lodging"
        assert record["ocr_data"] == {
            "tag": "receipt-ocr",
            "version": 2,
            "payload": {"total": 9800},
        }

    def test_recognition_payload_requires_tag(self):
        result = parse_input(
            ExpenseItemCreate,
            {
                "category": "lodging",
                "date": "2024-06-01",
                "amount": 1,
                "ocr_data": {"payload": {"total": 1}},
            },
        )

        assert "ocr_data.tag" in result.error.fields


class TestRegulationSchema:
    def test_record_serializes_tables(self):
        regulation = TravelRegulationCreate(
            company_name="Acme",
            version="2024.1",
            domestic_allowance={"executive": 8000, "manager": 6000, "general": 4000},
            overseas_allowance={"executive": 12000, "manager": 9000, "general": 6000},
        )

        record = regulation.to_record()
        assert record["distance_threshold"] == 100
        assert Decimal(record["domestic_allowance"]["manager"]) == Decimal("6000")

    def test_missing_tier_rejected(self):
        result = parse_input(
            TravelRegulationCreate,
            {
                "company_name": "Acme",
                "version": "1",
                "domestic_allowance": {"executive": 1, "manager": 1},
                "overseas_allowance": {"executive": 1, "manager": 1, "general": 1},
            },
        )

        assert "domestic_allowance.general" in result.error.fields
