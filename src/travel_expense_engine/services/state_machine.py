"""Application state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from travel_expense_engine.errors import TransitionError
from travel_expense_engine.models import UserRole


class ApplicationStatus(str, Enum):
    """Application status values."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    RETURNED = "returned"


class ApplicationAction(str, Enum):
    """Actions that move an application between statuses."""

    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    RETURN = "return"


def _value(member: str) -> str:
    return member.value if isinstance(member, Enum) else member


class ApplicationStateMachine:
    """State machine for business trip and expense applications.

    Allowed transitions:
    - draft → pending (submit)
    - returned → pending (resubmit)
    - pending → approved (approve)
    - pending → rejected (reject)
    - pending → returned (return)
    """

    # {action: (allowed_from_statuses, to_status)}
    TRANSITIONS: dict[ApplicationAction, tuple[frozenset[str], ApplicationStatus]] = {
        ApplicationAction.SUBMIT: (
            frozenset({ApplicationStatus.DRAFT, ApplicationStatus.RETURNED}),
            ApplicationStatus.PENDING,
        ),
        ApplicationAction.APPROVE: (
            frozenset({ApplicationStatus.PENDING}),
            ApplicationStatus.APPROVED,
        ),
        ApplicationAction.REJECT: (
            frozenset({ApplicationStatus.PENDING}),
            ApplicationStatus.REJECTED,
        ),
        ApplicationAction.RETURN: (
            frozenset({ApplicationStatus.PENDING}),
            ApplicationStatus.RETURNED,
        ),
    }

    # Terminal: no further transitions
    TERMINAL = frozenset({ApplicationStatus.APPROVED, ApplicationStatus.REJECTED})

    # Statuses in which the owner may edit fields
    EDITABLE = frozenset({ApplicationStatus.DRAFT, ApplicationStatus.RETURNED})

    # Actions reserved for approvers
    DECISIONS = frozenset(
        {ApplicationAction.APPROVE, ApplicationAction.REJECT, ApplicationAction.RETURN}
    )

    DECIDING_ROLES = frozenset({UserRole.APPROVER.value, UserRole.ADMIN.value})

    @classmethod
    def can_transition(cls, from_status: str, action: str) -> bool:
        """Check if an action is valid from a status."""
        try:
            allowed, _ = cls.TRANSITIONS[ApplicationAction(action)]
        except ValueError:
            return False
        return from_status in allowed

    @classmethod
    def target_status(cls, action: str) -> ApplicationStatus:
        """Status an action leads to."""
        return cls.TRANSITIONS[ApplicationAction(action)][1]

    @classmethod
    def check_transition(cls, from_status: str, action: str) -> TransitionError | None:
        """Return a TransitionError if the action is not valid, else None."""
        if cls.can_transition(from_status, action):
            return None
        status = _value(from_status)
        action = _value(action)
        if status in cls.TERMINAL:
            return TransitionError(status, action, "application is in a terminal state")
        if action == ApplicationAction.SUBMIT and status == ApplicationStatus.PENDING:
            return TransitionError(status, action, "application is already submitted")
        return TransitionError(status, action)

    @classmethod
    def validate_transition(cls, from_status: str, action: str) -> None:
        """Validate a transition, raising TransitionError if invalid."""
        error = cls.check_transition(from_status, action)
        if error is not None:
            raise error

    @classmethod
    def check_actor(cls, action: str, role: str, is_owner: bool) -> str | None:
        """Return the reason an actor may not perform an action, else None."""
        if ApplicationAction(action) in cls.DECISIONS:
            if role not in cls.DECIDING_ROLES:
                return f"role '{role}' may not {_value(action)} applications"
            return None
        if not is_owner:
            return "only the owner may submit an application"
        return None

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        """Check if no further transitions are allowed."""
        return status in cls.TERMINAL

    @classmethod
    def is_editable(cls, status: str) -> bool:
        """Check if the owner may edit the application."""
        return status in cls.EDITABLE

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return [
            to_status.value
            for allowed, to_status in cls.TRANSITIONS.values()
            if current_status in allowed
        ]
