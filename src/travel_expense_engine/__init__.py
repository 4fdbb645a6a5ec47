"""Travel Expense Engine - allowance estimation and approval lifecycle for trip and expense applications."""

from travel_expense_engine.calculators import (
    AllowanceRates,
    ExpenseEstimate,
    RegulationResolver,
    Tier,
    TravelScope,
    allowance_for,
    estimate,
    resolve_tier,
)
from travel_expense_engine.errors import (
    EngineError,
    NotFoundError,
    OperationResult,
    PartialCreationError,
    StoreError,
    TransitionError,
    ValidationError,
)
from travel_expense_engine.services import (
    Actor,
    ApplicationLifecycleService,
    ApplicationStateMachine,
    ApplicationStatus,
    ExpenseApplicationService,
    MonthlyTotals,
    PeriodStatisticsService,
    RecordStore,
    RegulationService,
    TripApplicationService,
)

__all__ = [
    "Actor",
    "AllowanceRates",
    "ApplicationLifecycleService",
    "ApplicationStateMachine",
    "ApplicationStatus",
    "EngineError",
    "ExpenseApplicationService",
    "ExpenseEstimate",
    "MonthlyTotals",
    "NotFoundError",
    "OperationResult",
    "PartialCreationError",
    "PeriodStatisticsService",
    "RecordStore",
    "RegulationResolver",
    "RegulationService",
    "StoreError",
    "Tier",
    "TransitionError",
    "TravelScope",
    "TripApplicationService",
    "ValidationError",
    "allowance_for",
    "estimate",
    "resolve_tier",
    "__version__",
]
__version__ = "0.1.0"
