"""Pytest fixtures for travel expense engine tests."""

from __future__ import annotations

from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from travel_expense_engine.database import make_session_factory
from travel_expense_engine.models import (
    Base,
    RegulationStatus,
    TravelRegulation,
    UserProfile,
    UserRole,
)
from travel_expense_engine.services import Actor, RecordStore

# In-memory SQLite shared across the sessions of one test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

COMPANY = "Test Trading Co."


@pytest.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    factory = make_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(session: AsyncSession) -> RecordStore:
    return RecordStore(session)


async def _add_profile(
    session: AsyncSession,
    full_name: str,
    position: str,
    role: UserRole = UserRole.USER,
    company_name: str | None = COMPANY,
) -> UserProfile:
    profile = UserProfile(
        id=uuid4(),
        full_name=full_name,
        company_name=company_name,
        position=position,
        department="Sales",
        role=role.value,
    )
    session.add(profile)
    await session.commit()
    return profile


@pytest.fixture
async def employee_profile(session: AsyncSession) -> UserProfile:
    return await _add_profile(session, "Hanako Sato", "一般職")


@pytest.fixture
async def manager_profile(session: AsyncSession) -> UserProfile:
    return await _add_profile(session, "Taro Suzuki", "営業部長")


@pytest.fixture
async def approver_profile(session: AsyncSession) -> UserProfile:
    return await _add_profile(session, "Jiro Tanaka", "課長", role=UserRole.APPROVER)


@pytest.fixture
async def admin_profile(session: AsyncSession) -> UserProfile:
    return await _add_profile(session, "Keiko Ito", "代表取締役", role=UserRole.ADMIN)


@pytest.fixture
def employee(employee_profile: UserProfile) -> Actor:
    return Actor.from_profile(employee_profile)


@pytest.fixture
def manager(manager_profile: UserProfile) -> Actor:
    return Actor.from_profile(manager_profile)


@pytest.fixture
def approver(approver_profile: UserProfile) -> Actor:
    return Actor.from_profile(approver_profile)


@pytest.fixture
def admin(admin_profile: UserProfile) -> Actor:
    return Actor.from_profile(admin_profile)


@pytest.fixture
async def active_regulation(session: AsyncSession, admin_profile: UserProfile) -> TravelRegulation:
    """An active regulation for the test company."""
    regulation = TravelRegulation(
        id=uuid4(),
        company_id=admin_profile.id,
        company_name=COMPANY,
        version="2024.1",
        status=RegulationStatus.ACTIVE.value,
        domestic_allowance={"executive": "8000", "manager": "6000", "general": "4000"},
        overseas_allowance={"executive": "12000", "manager": "9000", "general": "6000"},
        distance_threshold=100,
        created_by=admin_profile.id,
    )
    session.add(regulation)
    await session.commit()
    return regulation


@pytest.fixture
def trip_data() -> dict[str, str]:
    return {
        "title": "Osaka client visit",
        "purpose": "Quarterly review",
        "destination": "Osaka",
        "start_date": "2024-06-10",
        "end_date": "2024-06-12",
    }


@pytest.fixture
def expense_items() -> list[dict[str, object]]:
    return [
        {
            "category": "transportation",
            "date": "2024-06-10",
            "amount": Decimal("14720"),
            "description": "Shinkansen Tokyo-Shin-Osaka",
        },
        {
            "category": "lodging",
            "date": "2024-06-10",
            "amount": Decimal("9800"),
            "description": "Business hotel",
            "receipt_url": "https://receipts.example.com/r/1001.jpg",
            "ocr_data": {"tag": "receipt-ocr", "version": 2, "payload": {"total": 9800}},
        },
        {
            "category": "雑費",
            "date": "2024-06-11",
            "amount": Decimal("480"),
            "description": "Umbrella",
        },
    ]
