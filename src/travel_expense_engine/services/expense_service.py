"""Expense application service - totals and two-phase creation."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from travel_expense_engine.errors import (
    OperationResult,
    PartialCreationError,
    TransitionError,
)
from travel_expense_engine.models import ExpenseApplication, ExpenseItem
from travel_expense_engine.schemas import (
    ExpenseApplicationCreate,
    ExpenseItemCreate,
    parse_input,
)
from travel_expense_engine.services.identity import Actor
from travel_expense_engine.services.state_machine import ApplicationStatus
from travel_expense_engine.services.store import RecordStore

logger = logging.getLogger(__name__)


class ExpenseApplicationService:
    """Creates expense applications together with their items.

    Creation runs in three store writes:
    1. Insert the application (draft, total computed, ``items_attached=False``)
    2. Insert every item row referencing the new application
    3. Mark the application ``items_attached=True``

    A failure in step 1 leaves nothing behind and is reported as the store
    error. A failure in step 2 or 3 leaves an application that is still
    marked unattached; it is reported as PartialCreationError and can be
    found with ``find_incomplete`` and removed with ``discard_incomplete``.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def create_expense_application(
        self,
        actor: Actor,
        title: str,
        items: list[ExpenseItemCreate | dict[str, Any]],
    ) -> OperationResult[ExpenseApplication]:
        """Create a draft expense application with its items."""
        parsed = parse_input(ExpenseApplicationCreate, {"title": title, "items": items})
        if not parsed.success:
            return OperationResult.fail(parsed.error)
        request = parsed.data

        created = await self.store.create(
            ExpenseApplication,
            user_id=actor.user_id,
            title=request.title,
            total_amount=request.total_amount,
            status=ApplicationStatus.DRAFT.value,
            items_attached=False,
            submitted_at=None,
            approved_at=None,
            approver_id=None,
            approval_comment=None,
        )
        if not created.success:
            return created
        # a failed write rolls the session back and expires the instance
        application_id = created.data.id

        rows = [
            {"expense_application_id": application_id, **item.to_record()}
            for item in request.items
        ]
        inserted = await self.store.create_many(ExpenseItem, rows)
        if not inserted.success:
            return self._partial(application_id, inserted.error)

        marked = await self.store.update(
            ExpenseApplication, application_id, {"items_attached": True}
        )
        if not marked.success:
            return self._partial(application_id, marked.error)

        logger.info(
            "Created expense application %s for %s (%d items, total %s)",
            application_id,
            actor.user_id,
            len(rows),
            request.total_amount,
        )
        return await self.store.get(ExpenseApplication, application_id, refresh=True)

    async def get_items(self, application_id: UUID) -> OperationResult[list[ExpenseItem]]:
        """Items of an application in the order they were written."""
        return await self.store.list(
            ExpenseItem,
            ExpenseItem.expense_application_id == application_id,
            order_by=ExpenseItem.created_at.asc(),
        )

    async def find_incomplete(self, user_id: UUID) -> OperationResult[list[ExpenseApplication]]:
        """A user's applications whose items were never fully attached."""
        return await self.store.list(
            ExpenseApplication,
            ExpenseApplication.user_id == user_id,
            ExpenseApplication.items_attached.is_(False),
            order_by=ExpenseApplication.created_at.asc(),
        )

    async def discard_incomplete(self, application_id: UUID) -> OperationResult[int]:
        """Delete an application left behind by an interrupted creation."""
        loaded = await self.store.get(ExpenseApplication, application_id, refresh=True)
        if not loaded.success:
            return OperationResult.fail(loaded.error)
        if loaded.data.items_attached:
            return OperationResult.fail(
                TransitionError(
                    loaded.data.status,
                    "discard",
                    "application has all its items attached",
                )
            )

        items_deleted = await self.store.delete_where(
            ExpenseItem, ExpenseItem.expense_application_id == application_id
        )
        if not items_deleted.success:
            return items_deleted
        deleted = await self.store.delete(ExpenseApplication, application_id)
        if deleted.success:
            logger.info(
                "Discarded incomplete expense application %s (%d stray items)",
                application_id,
                items_deleted.data,
            )
        return deleted

    def _partial(self, application_id: UUID, cause: Any) -> OperationResult[ExpenseApplication]:
        error = PartialCreationError(application_id, cause)
        logger.error("%s", error.message)
        return OperationResult.fail(error)
