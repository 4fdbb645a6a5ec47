"""Allowance calculation."""

from travel_expense_engine.calculators.allowance_calculator import (
    ACCOMMODATION_PER_NIGHT,
    TRANSPORTATION_PER_DAY,
    estimate,
    trip_days,
)
from travel_expense_engine.calculators.regulation_resolver import (
    DEFAULT_DOMESTIC_ALLOWANCE,
    DEFAULT_OVERSEAS_ALLOWANCE,
    TIER_RULES,
    RegulationResolver,
    TierRule,
    allowance_for,
    resolve_tier,
)
from travel_expense_engine.calculators.types import (
    AllowanceRates,
    ExpenseEstimate,
    Tier,
    TravelScope,
)

__all__ = [
    "ACCOMMODATION_PER_NIGHT",
    "DEFAULT_DOMESTIC_ALLOWANCE",
    "DEFAULT_OVERSEAS_ALLOWANCE",
    "TIER_RULES",
    "TRANSPORTATION_PER_DAY",
    "AllowanceRates",
    "ExpenseEstimate",
    "RegulationResolver",
    "Tier",
    "TierRule",
    "TravelScope",
    "allowance_for",
    "estimate",
    "resolve_tier",
    "trip_days",
]
