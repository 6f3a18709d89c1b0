"""Calculator orchestrator — raw form → validated inputs → results.

Each submission follows this sequence:
  validate_inputs → (eligible) calculate_incentives
                  → (ineligible) zeroed results carrying the errors

Entry point: ``run_calculator(raw)``
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from tesvik_engine.config.calculator import IncentiveCalculatorInputs
from tesvik_engine.config.rules import DEFAULT_RULES, RuleSet
from tesvik_engine.data.source import IncentiveDataSource
from tesvik_engine.engine.calculator import calculate_incentives
from tesvik_engine.engine.validator import validate_inputs
from tesvik_engine.models.results import IncentiveCalculatorResults

logger = logging.getLogger(__name__)


def run_calculator(
    raw: Mapping[str, Any] | IncentiveCalculatorInputs,
    rules: RuleSet = DEFAULT_RULES,
    source: IncentiveDataSource | None = None,
    bsmv_rate: float | None = None,
    kkdf_rate: float | None = None,
) -> IncentiveCalculatorResults:
    """Validate a calculator form and, if eligible, compute its supports.

    Ineligible submissions return ``is_eligible=False`` with every monetary
    field (including the total fixed investment) left at zero.
    """
    outcome = validate_inputs(raw, rules)
    if not outcome.is_eligible or outcome.inputs is None:
        logger.info("Calculator input rejected: %d error(s)", len(outcome.validation_errors))
        return IncentiveCalculatorResults(
            is_eligible=False,
            validation_errors=outcome.validation_errors,
        )
    return calculate_incentives(
        outcome.inputs,
        rules=rules,
        source=source,
        bsmv_rate=bsmv_rate,
        kkdf_rate=kkdf_rate,
    )
