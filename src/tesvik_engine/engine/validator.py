"""Eligibility validator — raw form input → eligible / accumulated errors.

Field-level problems (negative or non-numeric values, unknown choices) come
from the pydantic model; business rules (minimum fixed investment, loan
details for interest support) are checked on top.  Every failing rule is
reported; nothing short-circuits.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from pydantic import ValidationError

from tesvik_engine.config.calculator import IncentiveCalculatorInputs
from tesvik_engine.config.enums import IncentiveType, SupportPreference
from tesvik_engine.config.rules import DEFAULT_RULES, RuleSet
from tesvik_engine.formatting import format_try
from tesvik_engine.models.results import ValidationOutcome

logger = logging.getLogger(__name__)


FIELD_LABELS: dict[str, str] = {
    "incentive_type": "Teşvik türü",
    "province": "İl",
    "district": "İlçe",
    "osb_status": "OSB durumu",
    "nace_code": "NACE kodu",
    "number_of_employees": "Çalışan sayısı",
    "land_cost": "Arazi maliyeti",
    "construction_cost": "Bina-inşaat maliyeti",
    "imported_machinery_cost": "İthal makine maliyeti",
    "domestic_machinery_cost": "Yerli makine maliyeti",
    "other_expenses": "Diğer giderler",
    "support_preference": "Destek tercihi",
    "tax_reduction_support": "Vergi indirimi tercihi",
    "bank_interest_rate": "Banka faiz oranı",
    "loan_amount": "Kredi tutarı",
    "loan_term_months": "Kredi vadesi",
}

COST_FIELDS = (
    "land_cost",
    "construction_cost",
    "imported_machinery_cost",
    "domestic_machinery_cost",
    "other_expenses",
)

_NUMERIC_ERRORS = {
    "int_parsing", "int_type", "int_from_float",
    "float_parsing", "float_type", "finite_number",
}


def _describe_error(err: Mapping[str, Any]) -> str:
    field = str(err["loc"][0]) if err.get("loc") else ""
    label = FIELD_LABELS.get(field, field)
    kind = err.get("type", "")
    if kind == "greater_than_equal":
        return f"{label} negatif olamaz."
    if kind in _NUMERIC_ERRORS:
        return f"{label} sayısal bir değer olmalıdır."
    if kind == "enum":
        return f"{label} için geçersiz seçim: {err.get('input')!r}."
    return f"{label}: {err.get('msg', 'geçersiz değer')}"


def _as_amount(value: Any) -> float | None:
    """Coerce a form value to a non-negative finite number, else None."""
    if isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def _partial_total(raw: Mapping[str, Any]) -> float | None:
    """Total fixed investment from raw fields, or None if any cost is unusable."""
    total = 0.0
    for name in COST_FIELDS:
        amount = _as_amount(raw.get(name, 0))
        if amount is None:
            return None
        total += amount
    return total


def _incentive_type(raw: Mapping[str, Any]) -> IncentiveType | None:
    value = raw.get("incentive_type", IncentiveType.TECHNOLOGY)
    try:
        return IncentiveType(value)
    except ValueError:
        return None


def validate_inputs(
    raw: Mapping[str, Any] | IncentiveCalculatorInputs,
    rules: RuleSet = DEFAULT_RULES,
) -> ValidationOutcome:
    """Validate a calculator form.

    Parameters
    ----------
    raw : Mapping | IncentiveCalculatorInputs
        Submitted form values (snake_case keys) or an already-built model.
    rules : RuleSet
        Supplies the per-type minimum fixed investment.

    Returns
    -------
    ValidationOutcome
        ``is_eligible`` is True only when there are no errors; ``inputs`` is
        set whenever every field parsed.
    """
    errors: list[str] = []
    inputs: IncentiveCalculatorInputs | None

    if isinstance(raw, IncentiveCalculatorInputs):
        inputs = raw
        data: Mapping[str, Any] = raw.model_dump()
    else:
        data = raw
        try:
            inputs = IncentiveCalculatorInputs.model_validate(dict(raw))
        except ValidationError as exc:
            inputs = None
            errors.extend(_describe_error(err) for err in exc.errors())

    # --- Minimum fixed investment ---
    total = inputs.total_fixed_investment if inputs is not None else _partial_total(data)
    incentive_type = inputs.incentive_type if inputs is not None else _incentive_type(data)
    if total is not None and incentive_type is not None:
        minimum = rules.minimum_fixed_investment.get(incentive_type)
        if minimum is None:
            logger.warning("No minimum fixed investment defined for %s", incentive_type.value)
        elif total < minimum:
            errors.append(
                f"Toplam sabit yatırım tutarı minimum {format_try(minimum)} olmalıdır. "
                f"Mevcut tutar: {format_try(total)}"
            )

    # --- Loan details for interest/profit-share support ---
    if inputs is not None and inputs.support_preference is SupportPreference.INTEREST_PROFIT_SHARE:
        if inputs.loan_amount <= 0:
            errors.append("Faiz/Kar Payı Desteği için kredi tutarı 0'dan büyük olmalıdır.")
        if inputs.loan_term_months <= 0:
            errors.append("Faiz/Kar Payı Desteği için kredi vadesi 0'dan büyük olmalıdır.")

    return ValidationOutcome(
        is_eligible=not errors,
        validation_errors=errors,
        inputs=inputs,
    )
