"""Support calculator — validated inputs → incentive amounts.

Per calculation:
  TFI            = land + construction + imported + domestic machinery + other
  SGK employer   = months × monthly premium × employees     (region-class schedule)
  SGK employee   = months × monthly premium × employees     (region 6 only)
  machinery      = min(machinery × rate, TFI × ratio, monetary cap)
  interest       = min(Σ loan interest × support rate, TFI × ratio, monetary cap)
  tax reduction  = (TFI − selected support) × contribution rate   (0 if declined)
  VAT            = machinery × VAT rate
  customs        = imported machinery × customs rate

Only one of machinery / interest support is ever non-zero.  Declining the
tax-reduction contribution switches to the uplifted cap tables.  Missing
table entries zero the affected support and add a warning; this module
never raises for business anomalies.
"""

from __future__ import annotations

import logging

from tesvik_engine.config.calculator import IncentiveCalculatorInputs
from tesvik_engine.config.enums import (
    RegionClass,
    SupportPreference,
    TaxReductionSupport,
)
from tesvik_engine.config.rules import (
    DEFAULT_RULES,
    InterestSupportRule,
    MachinerySupportRule,
    RuleSet,
)
from tesvik_engine.config.settings import settings
from tesvik_engine.data.source import IncentiveDataSource, default_data_source
from tesvik_engine.engine.classification import (
    ISTANBUL_MINING_WARNING,
    evaluate_special_program,
    is_istanbul_mining_investment,
)
from tesvik_engine.finance.payment_plan import build_payment_plan, summarize_payment_plan
from tesvik_engine.models.results import IncentiveCalculatorResults, PaymentPlan

logger = logging.getLogger(__name__)


MACHINERY_LABEL = "makine desteği"
INTEREST_LABEL = "faiz/kâr payı desteği"


def _missing_rule_warning(support: str, key: object) -> str:
    logger.warning("Rule table has no %s entry for %s", support, key)
    return f"{support.capitalize()} için kural tablosunda kayıt bulunamadı ({key}); destek 0 olarak hesaplandı."


def _resolve_region(
    inputs: IncentiveCalculatorInputs,
    source: IncentiveDataSource,
    rules: RuleSet,
    warnings: list[str],
) -> int | None:
    region = source.province_region(inputs.province)
    if region is None:
        warnings.append(
            f"'{inputs.province}' ili için bölge bilgisi bulunamadı; SGK prim desteği hesaplanmadı."
        )
        return None
    if inputs.nace_code and inputs.osb_status is not None:
        program = evaluate_special_program(
            inputs.province, inputs.district or "", inputs.osb_status,
            inputs.nace_code, region, rules,
        )
        if program.is_eligible:
            warnings.append(program.description)
            return 6
    return region


def _sgk_support(
    inputs: IncentiveCalculatorInputs,
    region: int | None,
    rules: RuleSet,
    warnings: list[str],
) -> tuple[float, float]:
    if region is None:
        return 0.0, 0.0
    key = (inputs.incentive_type, RegionClass.from_region(region))
    schedule = rules.sgk_schedules.get(key)
    if schedule is None:
        warnings.append(_missing_rule_warning("SGK prim desteği", f"{key[0].value}/{key[1].value}"))
        return 0.0, 0.0
    if inputs.number_of_employees == 0:
        warnings.append("Çalışan sayısı 0 olduğu için SGK prim desteği hesaplanmamıştır.")
    n = inputs.number_of_employees
    employer = schedule.employer_months * schedule.employer_monthly_premium * n
    employee = schedule.employee_months * schedule.employee_monthly_premium * n
    return round(employer, 2), round(employee, 2)


def _machinery_support(
    inputs: IncentiveCalculatorInputs,
    rule: MachinerySupportRule | None,
    warnings: list[str],
) -> float:
    if rule is None:
        warnings.append(_missing_rule_warning(MACHINERY_LABEL, inputs.incentive_type.value))
        return 0.0
    machinery = inputs.total_machinery_cost
    if machinery <= 0:
        warnings.append(
            "Makine desteği seçildi ancak makine maliyeti girilmedi; makine desteği 0 olarak hesaplandı."
        )
        return 0.0
    amount = min(
        machinery * rule.support_rate,
        inputs.total_fixed_investment * rule.investment_cap_ratio,
        rule.monetary_cap,
    )
    return round(amount, 2)


def _interest_support(
    inputs: IncentiveCalculatorInputs,
    rule: InterestSupportRule | None,
    bsmv_rate: float,
    kkdf_rate: float,
    warnings: list[str],
) -> tuple[float, PaymentPlan | None]:
    if inputs.loan_amount <= 0 or inputs.loan_term_months < 1:
        warnings.append("Kredi tutarı veya vadesi girilmediği için faiz/kâr payı desteği hesaplanmadı.")
        return 0.0, None

    rows = build_payment_plan(
        inputs.loan_amount,
        inputs.bank_interest_rate / 100,
        inputs.loan_term_months,
        bsmv_rate,
        kkdf_rate,
    )
    plan = summarize_payment_plan(inputs.loan_amount, inputs.bank_interest_rate / 100, rows)

    if rule is None:
        warnings.append(_missing_rule_warning(INTEREST_LABEL, inputs.incentive_type.value))
        return 0.0, plan

    support_rate_pp = min(inputs.bank_interest_rate * rule.rate_multiplier, rule.max_support_rate)
    preliminary = plan.total_interest * support_rate_pp / 100
    amount = min(
        preliminary,
        rule.monetary_cap,
        inputs.total_fixed_investment * rule.investment_cap_ratio,
    )
    return round(amount, 2), plan


def calculate_incentives(
    inputs: IncentiveCalculatorInputs,
    rules: RuleSet = DEFAULT_RULES,
    source: IncentiveDataSource | None = None,
    bsmv_rate: float | None = None,
    kkdf_rate: float | None = None,
) -> IncentiveCalculatorResults:
    """Compute every support amount for eligible inputs.

    Parameters
    ----------
    inputs : IncentiveCalculatorInputs
        Inputs that passed ``validate_inputs``.
    rules : RuleSet
        Rate / cap tables.
    source : IncentiveDataSource | None
        Province → region lookup.  Defaults to the packaged data.
    bsmv_rate, kkdf_rate : float | None
        Payment-plan levy rates; default to ``settings``.

    Returns
    -------
    IncentiveCalculatorResults
        ``is_eligible`` is always True here; anomalies become warnings.
    """
    source = source or default_data_source()
    bsmv_rate = settings.bsmv_rate if bsmv_rate is None else bsmv_rate
    kkdf_rate = settings.kkdf_rate if kkdf_rate is None else kkdf_rate
    warnings: list[str] = []

    tfi = round(inputs.total_fixed_investment, 2)
    region = _resolve_region(inputs, source, rules, warnings)

    # ── Categorical exclusion ─────────────────────────────────────────
    if inputs.nace_code and is_istanbul_mining_investment(inputs.province, inputs.nace_code):
        return IncentiveCalculatorResults(
            is_eligible=True,
            warning_messages=warnings + [ISTANBUL_MINING_WARNING],
            total_fixed_investment=tfi,
            region=region,
            support_suppressed=True,
        )

    # ── SGK premium support ───────────────────────────────────────────
    sgk_employer, sgk_employee = _sgk_support(inputs, region, rules, warnings)

    # ── Cap tables: standard vs uplifted ──────────────────────────────
    incentive_type = inputs.incentive_type
    if inputs.tax_reduction_support is TaxReductionSupport.YES:
        machinery_rule = rules.machinery_support.get(incentive_type)
        interest_rule = rules.interest_support.get(incentive_type)
    elif inputs.tax_reduction_support is TaxReductionSupport.NO:
        machinery_rule = rules.uplifted_machinery_support.get(incentive_type)
        interest_rule = rules.uplifted_interest_support.get(incentive_type)
        selected = (
            MACHINERY_LABEL
            if inputs.support_preference is SupportPreference.MACHINERY
            else INTEREST_LABEL
        )
        warnings.append(
            f"Vergi indirimi desteği talep edilmediğinden {selected} için "
            f"artırılmış oran ve üst limitler uygulanmıştır."
        )
    else:
        raise ValueError(f"Unhandled tax reduction choice: {inputs.tax_reduction_support!r}")

    # ── Machinery XOR interest support ────────────────────────────────
    payment_plan: PaymentPlan | None = None
    if inputs.support_preference is SupportPreference.MACHINERY:
        machinery_support = _machinery_support(inputs, machinery_rule, warnings)
        interest_support = 0.0
    elif inputs.support_preference is SupportPreference.INTEREST_PROFIT_SHARE:
        machinery_support = 0.0
        interest_support, payment_plan = _interest_support(
            inputs, interest_rule, bsmv_rate, kkdf_rate, warnings,
        )
    else:
        raise ValueError(f"Unhandled support preference: {inputs.support_preference!r}")

    # ── Tax reduction investment contribution ─────────────────────────
    tax_contribution = 0.0
    if inputs.tax_reduction_support is TaxReductionSupport.YES:
        rate = rules.tax_reduction_rates.get(incentive_type)
        if rate is None:
            warnings.append(_missing_rule_warning("vergi indirimi yatırıma katkı", incentive_type.value))
        else:
            selected_support = machinery_support + interest_support
            tax_contribution = round(max(tfi - selected_support, 0.0) * rate, 2)

    # ── VAT / customs exemption ───────────────────────────────────────
    exemption = rules.exemption
    vat_eligible = inputs.total_machinery_cost > 0
    customs_eligible = inputs.imported_machinery_cost > 0
    vat_amount = round(inputs.total_machinery_cost * exemption.vat_rate, 2)
    customs_amount = round(inputs.imported_machinery_cost * exemption.customs_rate, 2)

    results = IncentiveCalculatorResults(
        is_eligible=True,
        warning_messages=warnings,
        total_fixed_investment=tfi,
        region=region,
        vat_customs_exemption="MEVCUT" if (vat_eligible or customs_eligible) else "YOK",
        vat_exemption_eligible=vat_eligible,
        customs_exemption_eligible=customs_eligible,
        vat_exemption_amount=vat_amount,
        customs_exemption_amount=customs_amount,
        sgk_employer_premium_support=sgk_employer,
        sgk_employee_premium_support=sgk_employee,
        tax_reduction_investment_contribution=tax_contribution,
        machinery_support_amount=machinery_support,
        interest_profit_share_support_amount=interest_support,
        payment_plan=payment_plan,
    )
    # Total from the already-rounded parts, so it always matches their sum.
    results.total_support = round(sum(results.support_parts().values()), 2)
    return results
