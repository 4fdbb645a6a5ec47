"""Travel regulation service - drafting and activating company policies."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from travel_expense_engine.calculators import RegulationResolver
from travel_expense_engine.errors import OperationResult, TransitionError
from travel_expense_engine.models import RegulationStatus, TravelRegulation
from travel_expense_engine.schemas import TravelRegulationCreate, parse_input
from travel_expense_engine.services.identity import Actor
from travel_expense_engine.services.store import RecordStore

logger = logging.getLogger(__name__)


class RegulationService:
    """Manages a company's travel regulations.

    A regulation is drafted, then activated by an admin. Activation archives
    whichever regulation of the same company was active before, keeping at
    most one active regulation per company.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self.resolver = RegulationResolver(store)

    async def list_regulations(self, company_name: str) -> OperationResult[list[TravelRegulation]]:
        """A company's regulations, newest first."""
        return await self.store.list(
            TravelRegulation,
            TravelRegulation.company_name == company_name,
            order_by=TravelRegulation.created_at.desc(),
        )

    async def get_active_regulation(
        self, company_name: str
    ) -> OperationResult[TravelRegulation | None]:
        """The company's active regulation, or None."""
        return await self.resolver.active_regulation(company_name)

    async def create_regulation(
        self,
        actor: Actor,
        data: TravelRegulationCreate | dict[str, Any],
    ) -> OperationResult[TravelRegulation]:
        """Draft a new regulation."""
        parsed = parse_input(TravelRegulationCreate, data)
        if not parsed.success:
            return OperationResult.fail(parsed.error)

        result = await self.store.create(
            TravelRegulation,
            **parsed.data.to_record(),
            company_id=actor.user_id,
            status=RegulationStatus.DRAFT.value,
            created_by=actor.user_id,
        )
        if result.success:
            logger.info(
                "Drafted regulation %s v%s for %s",
                result.data.id,
                result.data.version,
                result.data.company_name,
            )
        return result

    async def activate_regulation(
        self, actor: Actor, regulation_id: UUID
    ) -> OperationResult[TravelRegulation]:
        """Make a draft regulation the company's active one.

        Archiving the previous regulation and activating this one are
        committed together, so a failed activation leaves the previous
        regulation active.
        """
        loaded = await self.store.get(TravelRegulation, regulation_id, refresh=True)
        if not loaded.success:
            return loaded
        regulation = loaded.data
        status = regulation.status
        company_name = regulation.company_name
        version = regulation.version

        if not actor.is_admin:
            return OperationResult.fail(
                TransitionError(status, "activate", "only admins may activate regulations")
            )
        if actor.company_name != company_name:
            return OperationResult.fail(
                TransitionError(
                    status, "activate", "admins may only activate their own company's regulations"
                )
            )
        if status != RegulationStatus.DRAFT.value:
            return OperationResult.fail(
                TransitionError(status, "activate", "only draft regulations can be activated")
            )

        current = await self.get_active_regulation(company_name)
        if not current.success:
            return OperationResult.fail(current.error)

        unit = self.store.unit()
        if current.data is not None:
            archived = await unit.update(
                TravelRegulation,
                current.data.id,
                {"status": RegulationStatus.ARCHIVED.value},
                expected_status=RegulationStatus.ACTIVE.value,
            )
            if not archived.success:
                return OperationResult.fail(archived.error)

        activated = await unit.update(
            TravelRegulation,
            regulation_id,
            {"status": RegulationStatus.ACTIVE.value},
            expected_status=RegulationStatus.DRAFT.value,
        )
        if not activated.success:
            return OperationResult.fail(activated.error)
        if activated.data == 0:
            await unit.rollback()
            now = await self.store.get(TravelRegulation, regulation_id, refresh=True)
            now_status = now.data.status if now.success else status
            return OperationResult.fail(
                TransitionError(now_status, "activate", "status changed concurrently")
            )

        committed = await unit.commit()
        if not committed.success:
            return OperationResult.fail(committed.error)

        logger.info("Activated regulation %s v%s for %s", regulation_id, version, company_name)
        return await self.store.get(TravelRegulation, regulation_id, refresh=True)
