"""Pydantic schemas for engine inputs."""

from __future__ import annotations

import datetime as dt
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from travel_expense_engine.errors import OperationResult, ValidationError
from travel_expense_engine.models import ExpenseCategory

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Category labels as written on Japanese expense forms
CATEGORY_LABELS: dict[str, ExpenseCategory] = {
    "交通費": ExpenseCategory.TRANSPORTATION,
    "宿泊費": ExpenseCategory.LODGING,
    "日当": ExpenseCategory.PER_DIEM,
    "雑費": ExpenseCategory.MISCELLANEOUS,
    "per-diem": ExpenseCategory.PER_DIEM,
}


def parse_input(schema: type[SchemaT], data: Any) -> OperationResult[SchemaT]:
    """Validate raw input against a schema.

    Pydantic errors become a single ValidationError keyed by field path.
    """
    if isinstance(data, schema):
        return OperationResult.ok(data)
    try:
        return OperationResult.ok(schema.model_validate(data))
    except PydanticValidationError as exc:
        fields = {
            ".".join(str(part) for part in err["loc"]) or "__root__": err["msg"]
            for err in exc.errors()
        }
        summary = "; ".join(f"{name}: {msg}" for name, msg in fields.items())
        return OperationResult.fail(ValidationError(f"Invalid {schema.__name__}: {summary}", fields))


# ============================================================================
# Business trip schemas
# ============================================================================


class TripApplicationCreate(BaseModel):
    """Schema for creating a business trip application."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    purpose: str = ""
    destination: str = ""
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_dates(self) -> TripApplicationCreate:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripApplicationUpdate(BaseModel):
    """Schema for editing a draft or returned trip application."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    title: str | None = Field(default=None, min_length=1)
    purpose: str | None = None
    destination: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @property
    def changes_dates(self) -> bool:
        return self.start_date is not None or self.end_date is not None


# ============================================================================
# Expense schemas
# ============================================================================


class RecognitionPayload(BaseModel):
    """Receipt recognition output, tagged with its producer's schema.

    The engine stores it untouched; ``tag`` and ``version`` let producers and
    consumers evolve the payload format independently.
    """

    tag: str = Field(min_length=1)
    version: int = Field(default=1, ge=1)
    payload: Any = None


class ExpenseItemCreate(BaseModel):
    """Schema for one expense line."""

    model_config = ConfigDict(str_strip_whitespace=True)

    category: ExpenseCategory
    date: dt.date
    amount: Decimal = Field(ge=0)
    description: str = ""
    receipt_url: str | None = None
    ocr_data: RecognitionPayload | None = None

    @field_validator("category", mode="before")
    @classmethod
    def map_category_label(cls, value: Any) -> Any:
        if isinstance(value, str):
            return CATEGORY_LABELS.get(value.strip(), value)
        return value

    def to_record(self) -> dict[str, Any]:
        """Column values for an expense_items row."""
        return {
            "category": self.category.value,
            "date": self.date,
            "amount": self.amount,
            "description": self.description,
            "receipt_url": self.receipt_url,
            "ocr_data": self.ocr_data.model_dump(mode="json") if self.ocr_data else None,
        }


class ExpenseApplicationCreate(BaseModel):
    """Schema for creating an expense application with its items."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    items: list[ExpenseItemCreate] = Field(min_length=1)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))


# ============================================================================
# Travel regulation schemas
# ============================================================================


class AllowanceTable(BaseModel):
    """Per-diem amount for each tier."""

    executive: Decimal = Field(ge=0)
    manager: Decimal = Field(ge=0)
    general: Decimal = Field(ge=0)


class TravelRegulationCreate(BaseModel):
    """Schema for drafting a new travel regulation."""

    model_config = ConfigDict(str_strip_whitespace=True)

    company_name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    regulation_data: dict[str, Any] | None = None
    domestic_allowance: AllowanceTable
    overseas_allowance: AllowanceTable
    distance_threshold: int = Field(default=100, ge=0)

    def to_record(self) -> dict[str, Any]:
        """Column values for a travel_regulations row (tables as JSON)."""
        return self.model_dump(mode="json")
