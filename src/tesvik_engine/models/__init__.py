"""Result models — calculator and query output contracts."""

from tesvik_engine.models.results import (
    IncentiveCalculatorResults,
    PaymentPlan,
    PaymentPlanDetail,
    ValidationOutcome,
)
from tesvik_engine.models.incentive import (
    Amount,
    IncentiveResult,
    LocationClassification,
    LocationInfo,
    NotApplicable,
    SectorInfo,
    SpecialProgram,
    SupportsInfo,
)

__all__ = [
    "IncentiveCalculatorResults",
    "PaymentPlan",
    "PaymentPlanDetail",
    "ValidationOutcome",
    "Amount",
    "NotApplicable",
    "IncentiveResult",
    "LocationClassification",
    "LocationInfo",
    "SectorInfo",
    "SpecialProgram",
    "SupportsInfo",
]
