"""Integration test fixtures: services wired to the in-memory store."""

from __future__ import annotations

import pytest

from travel_expense_engine.models import BusinessTripApplication, ExpenseApplication
from travel_expense_engine.services import (
    ApplicationLifecycleService,
    ExpenseApplicationService,
    PeriodStatisticsService,
    RecordStore,
    RegulationService,
    TripApplicationService,
)


@pytest.fixture
def trips(store: RecordStore) -> TripApplicationService:
    return TripApplicationService(store)


@pytest.fixture
def expenses(store: RecordStore) -> ExpenseApplicationService:
    return ExpenseApplicationService(store)


@pytest.fixture
def lifecycle(store: RecordStore) -> ApplicationLifecycleService:
    return ApplicationLifecycleService(store)


@pytest.fixture
def statistics(store: RecordStore) -> PeriodStatisticsService:
    return PeriodStatisticsService(store)


@pytest.fixture
def regulations(store: RecordStore) -> RegulationService:
    return RegulationService(store)


@pytest.fixture
async def draft_trip(trips, employee, trip_data) -> BusinessTripApplication:
    """A draft trip owned by the employee, estimated at default rates."""
    result = await trips.create_trip_application(employee, trip_data)
    return result.unwrap()


@pytest.fixture
async def pending_trip(lifecycle, employee, draft_trip) -> BusinessTripApplication:
    result = await lifecycle.submit(BusinessTripApplication, draft_trip.id, employee)
    return result.unwrap()


@pytest.fixture
async def draft_expense(expenses, employee, expense_items) -> ExpenseApplication:
    result = await expenses.create_expense_application(employee, "Osaka receipts", expense_items)
    return result.unwrap()
