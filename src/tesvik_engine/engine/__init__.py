"""Engine — eligibility validation, support calculation and incentive queries."""

from tesvik_engine.engine.validator import validate_inputs
from tesvik_engine.engine.calculator import calculate_incentives
from tesvik_engine.engine.classification import (
    classify_location,
    evaluate_special_program,
    query_incentives,
)
from tesvik_engine.engine.orchestrator import run_calculator

__all__ = [
    "validate_inputs",
    "calculate_incentives",
    "run_calculator",
    # Sector / location query
    "classify_location",
    "query_incentives",
    "evaluate_special_program",
]
