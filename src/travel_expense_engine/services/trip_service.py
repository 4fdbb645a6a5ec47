"""Business trip application service - creation and editing with estimates."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any
from uuid import UUID

from travel_expense_engine.calculators import (
    ExpenseEstimate,
    RegulationResolver,
    TravelScope,
    estimate,
)
from travel_expense_engine.errors import OperationResult, TransitionError
from travel_expense_engine.models import BusinessTripApplication
from travel_expense_engine.schemas import (
    TripApplicationCreate,
    TripApplicationUpdate,
    parse_input,
)
from travel_expense_engine.services.identity import Actor
from travel_expense_engine.services.state_machine import (
    ApplicationStateMachine,
    ApplicationStatus,
)
from travel_expense_engine.services.store import RecordStore

logger = logging.getLogger(__name__)


class TripApplicationService:
    """Creates and edits business trip applications.

    The estimate is never written on its own: any write that changes a trip's
    dates or travel scope recomputes it from the dates being written, the
    stored scope and the traveler's current rate, so dates and estimate
    always change together.
    """

    def __init__(self, store: RecordStore):
        self.store = store
        self.resolver = RegulationResolver(store)

    async def preview_estimate(
        self,
        actor: Actor,
        start_date: date | str | None,
        end_date: date | str | None,
        scope: TravelScope = TravelScope.DOMESTIC,
    ) -> OperationResult[ExpenseEstimate]:
        """Estimate a trip for the actor without writing anything."""
        rates = await self.resolver.rates_for_actor(actor)
        if not rates.success:
            return OperationResult.fail(rates.error)
        return estimate(start_date, end_date, rates.data.for_scope(scope))

    async def create_trip_application(
        self,
        actor: Actor,
        data: TripApplicationCreate | dict[str, Any],
        scope: TravelScope = TravelScope.DOMESTIC,
    ) -> OperationResult[BusinessTripApplication]:
        """Create a draft trip application with its estimate attached."""
        parsed = parse_input(TripApplicationCreate, data)
        if not parsed.success:
            return OperationResult.fail(parsed.error)
        trip = parsed.data

        estimated = await self.preview_estimate(actor, trip.start_date, trip.end_date, scope)
        if not estimated.success:
            return OperationResult.fail(estimated.error)

        result = await self.store.create(
            BusinessTripApplication,
            user_id=actor.user_id,
            title=trip.title,
            purpose=trip.purpose,
            destination=trip.destination,
            start_date=trip.start_date,
            end_date=trip.end_date,
            travel_scope=TravelScope(scope).value,
            status=ApplicationStatus.DRAFT.value,
            submitted_at=None,
            approved_at=None,
            approver_id=None,
            approval_comment=None,
            **estimated.data.to_record(),
        )
        if result.success:
            logger.info(
                "Created trip application %s for %s (%s days, total %s)",
                result.data.id,
                actor.user_id,
                estimated.data.days,
                estimated.data.total,
            )
        return result

    async def update_trip_application(
        self,
        actor: Actor,
        application_id: UUID,
        changes: TripApplicationUpdate | dict[str, Any],
        scope: TravelScope | None = None,
    ) -> OperationResult[BusinessTripApplication]:
        """Edit a draft or returned trip application.

        When the dates change or a ``scope`` is given, the estimate is
        recomputed from the merged dates, the scope (given, else stored) and
        the actor's current rate. Other edits leave the estimate untouched.
        """
        parsed = parse_input(TripApplicationUpdate, changes)
        if not parsed.success:
            return OperationResult.fail(parsed.error)
        update = parsed.data

        loaded = await self.store.get(BusinessTripApplication, application_id, refresh=True)
        if not loaded.success:
            return loaded
        application = loaded.data
        status = application.status

        if application.user_id != actor.user_id:
            return OperationResult.fail(
                TransitionError(status, "edit", "only the owner may edit an application")
            )
        if not ApplicationStateMachine.is_editable(status):
            return OperationResult.fail(
                TransitionError(status, "edit", "only draft or returned applications are editable")
            )

        values = update.model_dump(exclude_none=True)
        start = update.start_date or application.start_date
        end = update.end_date or application.end_date
        total = application.estimated_total

        if update.changes_dates or scope is not None:
            billed_scope = TravelScope(scope if scope is not None else application.travel_scope)
            estimated = await self.preview_estimate(actor, start, end, billed_scope)
            if not estimated.success:
                return OperationResult.fail(estimated.error)
            values.update(estimated.data.to_record())
            values["travel_scope"] = billed_scope.value
            total = estimated.data.total

        if not values:
            return loaded

        written = await self.store.update(
            BusinessTripApplication, application_id, values, expected_status=status
        )
        if not written.success:
            return OperationResult.fail(written.error)
        if written.data == 0:
            current = await self.store.get(BusinessTripApplication, application_id, refresh=True)
            current_status = current.data.status if current.success else status
            return OperationResult.fail(
                TransitionError(current_status, "edit", "status changed concurrently")
            )

        logger.info(
            "Updated trip application %s (dates %s..%s, total %s)",
            application_id,
            start,
            end,
            total,
        )
        return await self.store.get(BusinessTripApplication, application_id, refresh=True)
