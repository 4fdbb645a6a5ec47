"""Reimbursement tier and per-diem rate resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from travel_expense_engine.calculators.types import AllowanceRates, Tier
from travel_expense_engine.errors import OperationResult
from travel_expense_engine.models import RegulationStatus, TravelRegulation

if TYPE_CHECKING:
    from travel_expense_engine.services.identity import Actor
    from travel_expense_engine.services.store import RecordStore

logger = logging.getLogger(__name__)

# Policy defaults used when a company has no active regulation
DEFAULT_DOMESTIC_ALLOWANCE = Decimal("5000")
DEFAULT_OVERSEAS_ALLOWANCE = Decimal("7500")


@dataclass(frozen=True)
class TierRule:
    """Maps a position to a tier when any marker occurs in it."""

    tier: Tier
    markers: tuple[str, ...]

    def matches(self, position: str) -> bool:
        folded = position.casefold()
        return any(marker.casefold() in folded for marker in self.markers)


# Ordered: first matching rule wins. This is a heuristic over free text, not
# a controlled vocabulary; e.g. "Office Manager Assistant" resolves to manager.
TIER_RULES: tuple[TierRule, ...] = (
    TierRule(Tier.EXECUTIVE, ("役員", "代表", "executive", "officer")),
    TierRule(Tier.MANAGER, ("部長", "管理", "manager", "management")),
)


def resolve_tier(position: str | None) -> Tier:
    """Resolve a reimbursement tier from free-text position."""
    if not position:
        return Tier.GENERAL
    for rule in TIER_RULES:
        if rule.matches(position):
            return rule.tier
    return Tier.GENERAL


def _table_rate(table: dict[str, Any] | None, tier: Tier, default: Decimal) -> Decimal:
    """Look up a tier's rate in an allowance table, falling back to default.

    Missing, empty or zero entries count as unset.
    """
    if not table:
        return default
    raw = table.get(tier.value)
    if raw in (None, ""):
        return default
    rate = Decimal(str(raw))
    return rate if rate else default


def allowance_for(tier: Tier, regulation: TravelRegulation | None) -> AllowanceRates:
    """Return domestic/overseas per-diem rates for a tier.

    Without an active regulation the policy defaults apply.
    """
    if regulation is None:
        return AllowanceRates(
            domestic=DEFAULT_DOMESTIC_ALLOWANCE,
            overseas=DEFAULT_OVERSEAS_ALLOWANCE,
        )

    return AllowanceRates(
        domestic=_table_rate(regulation.domestic_allowance, tier, DEFAULT_DOMESTIC_ALLOWANCE),
        overseas=_table_rate(regulation.overseas_allowance, tier, DEFAULT_OVERSEAS_ALLOWANCE),
    )


class RegulationResolver:
    """Resolves per-diem rates for a requester against their company's policy.

    Resolution:
    1. Tier from the requester's position text (ordered marker rules)
    2. Active regulation for the requester's company, if any
    3. Rate table lookup with per-tier fallback to the policy defaults
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def active_regulation(
        self, company_name: str | None
    ) -> OperationResult[TravelRegulation | None]:
        """Load the active regulation for a company (None when absent)."""
        if not company_name:
            return OperationResult.ok(None)

        result = await self.store.list(
            TravelRegulation,
            TravelRegulation.company_name == company_name,
            TravelRegulation.status == RegulationStatus.ACTIVE.value,
            order_by=TravelRegulation.updated_at.desc(),
            limit=1,
        )
        if not result.success:
            return OperationResult.fail(result.error)
        regulations = result.data or []
        return OperationResult.ok(regulations[0] if regulations else None)

    async def rates_for_actor(self, actor: Actor) -> OperationResult[AllowanceRates]:
        """Resolve rates for an actor's position and company."""
        lookup = await self.active_regulation(actor.company_name)
        if not lookup.success:
            return OperationResult.fail(lookup.error)

        tier = resolve_tier(actor.position)
        rates = allowance_for(tier, lookup.data)
        logger.debug(
            "Resolved tier %s for position %r: domestic=%s overseas=%s",
            tier.value,
            actor.position,
            rates.domestic,
            rates.overseas,
        )
        return OperationResult.ok(rates)
