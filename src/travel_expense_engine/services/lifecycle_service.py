"""Application lifecycle service - submission and approval decisions."""

from __future__ import annotations

import logging
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import select

from travel_expense_engine.errors import OperationResult, TransitionError, ValidationError
from travel_expense_engine.models import (
    BusinessTripApplication,
    ExpenseApplication,
    UserProfile,
    utcnow,
)
from travel_expense_engine.services.identity import Actor
from travel_expense_engine.services.state_machine import (
    ApplicationAction,
    ApplicationStateMachine,
    ApplicationStatus,
)
from travel_expense_engine.services.store import RecordStore

logger = logging.getLogger(__name__)

ApplicationT = TypeVar("ApplicationT", BusinessTripApplication, ExpenseApplication)


class ApplicationLifecycleService:
    """Moves business trip and expense applications through their lifecycle.

    Operations:
    - submit: owner sends a draft or returned application for approval
    - approve: approver/admin accepts a pending application
    - reject: approver/admin refuses a pending application (comment required)
    - return_for_revision: approver/admin hands a pending application back

    Decisions are written with a conditional update on the status read
    beforehand, so of two approvers deciding the same application at once
    only the first write lands; the other gets a TransitionError.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def submit(
        self,
        model: type[ApplicationT],
        application_id: UUID,
        actor: Actor,
    ) -> OperationResult[ApplicationT]:
        """Submit (or resubmit) an application for approval."""
        return await self._transition(
            model,
            application_id,
            actor,
            ApplicationAction.SUBMIT,
            {"submitted_at": utcnow()},
        )

    async def approve(
        self,
        model: type[ApplicationT],
        application_id: UUID,
        actor: Actor,
        comment: str | None = None,
    ) -> OperationResult[ApplicationT]:
        """Approve a pending application."""
        return await self._transition(
            model,
            application_id,
            actor,
            ApplicationAction.APPROVE,
            {
                "approved_at": utcnow(),
                "approver_id": actor.user_id,
                "approval_comment": _clean(comment),
            },
        )

    async def reject(
        self,
        model: type[ApplicationT],
        application_id: UUID,
        actor: Actor,
        comment: str | None,
    ) -> OperationResult[ApplicationT]:
        """Reject a pending application. A comment is required."""
        comment = _clean(comment)
        if comment is None:
            return OperationResult.fail(
                ValidationError(
                    "A comment is required to reject an application",
                    {"approval_comment": "required"},
                )
            )
        return await self._transition(
            model,
            application_id,
            actor,
            ApplicationAction.REJECT,
            {"approver_id": actor.user_id, "approval_comment": comment},
        )

    async def return_for_revision(
        self,
        model: type[ApplicationT],
        application_id: UUID,
        actor: Actor,
        comment: str | None = None,
    ) -> OperationResult[ApplicationT]:
        """Return a pending application to its owner for revision."""
        return await self._transition(
            model,
            application_id,
            actor,
            ApplicationAction.RETURN,
            {"approver_id": actor.user_id, "approval_comment": _clean(comment)},
        )

    async def list_for_user(
        self, model: type[ApplicationT], user_id: UUID
    ) -> OperationResult[list[ApplicationT]]:
        """An owner's applications, newest first."""
        return await self.store.list(
            model,
            model.user_id == user_id,
            order_by=model.created_at.desc(),
        )

    async def pending_queue(
        self,
        model: type[ApplicationT],
        company_name: str | None = None,
    ) -> OperationResult[list[ApplicationT]]:
        """Pending applications in submission order (oldest first).

        With ``company_name``, only applications whose owner belongs to that
        company are listed.
        """
        criteria: list[Any] = [model.status == ApplicationStatus.PENDING.value]
        if company_name:
            criteria.append(
                model.user_id.in_(
                    select(UserProfile.id).where(UserProfile.company_name == company_name)
                )
            )
        return await self.store.list(model, *criteria, order_by=model.submitted_at.asc())

    async def _transition(
        self,
        model: type[ApplicationT],
        application_id: UUID,
        actor: Actor,
        action: ApplicationAction,
        values: dict[str, Any],
    ) -> OperationResult[ApplicationT]:
        """Validate and apply one transition.

        Nothing is written unless the actor, the current status and (for
        expenses) the attached items all allow the action.
        """
        loaded = await self.store.get(model, application_id, refresh=True)
        if not loaded.success:
            return loaded
        application = loaded.data
        from_status = application.status

        reason = ApplicationStateMachine.check_actor(
            action, actor.role, is_owner=application.user_id == actor.user_id
        )
        if reason is not None:
            return OperationResult.fail(TransitionError(from_status, action.value, reason))

        error = ApplicationStateMachine.check_transition(from_status, action)
        if error is not None:
            return OperationResult.fail(error)

        if (
            action == ApplicationAction.SUBMIT
            and isinstance(application, ExpenseApplication)
            and not application.items_attached
        ):
            return OperationResult.fail(
                TransitionError(from_status, action.value, "expense items were never attached")
            )

        to_status = ApplicationStateMachine.target_status(action)
        updated = await self.store.update(
            model,
            application_id,
            {**values, "status": to_status.value},
            expected_status=from_status,
        )
        if not updated.success:
            return OperationResult.fail(updated.error)

        if updated.data == 0:
            current = await self.store.get(model, application_id, refresh=True)
            current_status = current.data.status if current.success else from_status
            logger.warning(
                "Lost race to %s %s %s: status is now %s",
                action.value,
                model.__tablename__,
                application_id,
                current_status,
            )
            return OperationResult.fail(
                TransitionError(current_status, action.value, "status changed concurrently")
            )

        logger.info(
            "%s %s: %s -> %s by %s",
            model.__tablename__,
            application_id,
            from_status,
            to_status.value,
            actor.user_id,
        )
        return await self.store.get(model, application_id, refresh=True)


def _clean(comment: str | None) -> str | None:
    if comment is None:
        return None
    comment = comment.strip()
    return comment or None
