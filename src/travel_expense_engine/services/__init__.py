"""Travel expense engine services."""

from travel_expense_engine.services.expense_service import ExpenseApplicationService
from travel_expense_engine.services.identity import Actor, load_actor
from travel_expense_engine.services.lifecycle_service import ApplicationLifecycleService
from travel_expense_engine.services.regulation_service import RegulationService
from travel_expense_engine.services.state_machine import (
    ApplicationAction,
    ApplicationStateMachine,
    ApplicationStatus,
)
from travel_expense_engine.services.statistics_service import (
    MonthlyTotals,
    PeriodStatisticsService,
    month_bounds,
)
from travel_expense_engine.services.store import RecordStore
from travel_expense_engine.services.trip_service import TripApplicationService

__all__ = [
    "Actor",
    "ApplicationAction",
    "ApplicationLifecycleService",
    "ApplicationStateMachine",
    "ApplicationStatus",
    "ExpenseApplicationService",
    "MonthlyTotals",
    "PeriodStatisticsService",
    "RecordStore",
    "RegulationService",
    "TripApplicationService",
    "load_actor",
    "month_bounds",
]
