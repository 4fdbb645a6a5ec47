"""Type definitions for the allowance calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class Tier(str, Enum):
    """Position-derived reimbursement tier."""

    EXECUTIVE = "executive"
    MANAGER = "manager"
    GENERAL = "general"


class TravelScope(str, Enum):
    """Which per-diem table a trip is billed against.

    Classifying a destination as domestic or overseas is the caller's
    decision; the engine only applies the matching rate.
    """

    DOMESTIC = "domestic"
    OVERSEAS = "overseas"


@dataclass(frozen=True)
class AllowanceRates:
    """Per-diem rates resolved for one tier."""

    domestic: Decimal
    overseas: Decimal

    def for_scope(self, scope: TravelScope) -> Decimal:
        """Return the rate for the given travel scope."""
        return self.overseas if scope == TravelScope.OVERSEAS else self.domestic

    def to_dict(self) -> dict[str, Decimal]:
        return {"domestic": self.domestic, "overseas": self.overseas}


@dataclass(frozen=True)
class ExpenseEstimate:
    """Estimated trip cost breakdown.

    ``total`` always equals the sum of the three components; instances are
    only built by ``estimate``.
    """

    days: int
    daily_allowance: Decimal
    transportation: Decimal
    accommodation: Decimal
    total: Decimal

    def to_record(self) -> dict[str, Decimal]:
        """Map onto the ``estimated_*`` columns of a trip application."""
        return {
            "estimated_daily_allowance": self.daily_allowance,
            "estimated_transportation": self.transportation,
            "estimated_accommodation": self.accommodation,
            "estimated_total": self.total,
        }

    def to_dict(self) -> dict[str, Decimal]:
        """camelCase breakdown as shown to the applicant."""
        return {
            "dailyAllowance": self.daily_allowance,
            "transportation": self.transportation,
            "accommodation": self.accommodation,
            "total": self.total,
        }
