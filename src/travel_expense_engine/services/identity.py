"""Identity boundary: who is acting and in what role."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from travel_expense_engine.errors import OperationResult
from travel_expense_engine.models import UserProfile, UserRole
from travel_expense_engine.services.store import RecordStore


@dataclass(frozen=True)
class Actor:
    """Current user as seen by the engine."""

    user_id: UUID
    role: str = UserRole.USER.value
    full_name: str | None = None
    company_name: str | None = None
    position: str | None = None
    department: str | None = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> Actor:
        return cls(
            user_id=profile.id,
            role=profile.role,
            full_name=profile.full_name,
            company_name=profile.company_name,
            position=profile.position,
            department=profile.department,
        )

    @property
    def can_decide(self) -> bool:
        """Whether this actor may approve, reject or return applications."""
        return self.role in (UserRole.APPROVER.value, UserRole.ADMIN.value)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


async def load_actor(store: RecordStore, user_id: UUID) -> OperationResult[Actor]:
    """Build an Actor from the stored profile."""
    result = await store.get(UserProfile, user_id)
    if not result.success:
        return OperationResult.fail(result.error)
    return OperationResult.ok(Actor.from_profile(result.data))
