"""Tests for the support calculator and the calculator orchestrator."""

from dataclasses import replace
from types import MappingProxyType

import pytest

from tesvik_engine.config import (
    DEFAULT_RULES,
    IncentiveCalculatorInputs,
    SupportPreference,
    TaxReductionSupport,
)
from tesvik_engine.engine.calculator import calculate_incentives
from tesvik_engine.engine.orchestrator import run_calculator


def _with(inputs: IncentiveCalculatorInputs, **changes) -> IncentiveCalculatorInputs:
    return IncentiveCalculatorInputs(**{**inputs.model_dump(), **changes})


# ═══════════════════════════════════════════════════════════════════════════
# End-to-end scenarios
# ═══════════════════════════════════════════════════════════════════════════


class TestScenarios:
    def test_machinery_support_scenario(self, machinery_form):
        result = run_calculator(machinery_form)
        assert result.is_eligible
        assert result.interest_profit_share_support_amount == 0
        assert result.machinery_support_amount > 0
        assert result.payment_plan is None

    def test_no_machinery_cost_scenario(self, machinery_form):
        form = {**machinery_form, "imported_machinery_cost": 0, "domestic_machinery_cost": 0,
                "construction_cost": 10_000_000}
        result = run_calculator(form)
        assert result.is_eligible
        assert result.machinery_support_amount == 0
        assert any("makine maliyeti girilmedi" in w for w in result.warning_messages)

    def test_below_minimum_scenario(self, machinery_form):
        form = {**machinery_form, "construction_cost": 100_000, "imported_machinery_cost": 0,
                "domestic_machinery_cost": 0}
        result = run_calculator(form)
        assert not result.is_eligible
        assert result.validation_errors
        assert result.total_fixed_investment == 0
        assert result.total_support == 0
        assert all(v == 0 for v in result.support_parts().values())
        assert result.payment_plan is None

    def test_infinite_cost_scenario(self, machinery_form):
        result = run_calculator({**machinery_form, "land_cost": "inf"})
        assert not result.is_eligible
        assert result.total_fixed_investment == 0
        assert result.total_support == 0

    def test_30_year_loan_scenario(self, interest_form):
        result = run_calculator({**interest_form, "loan_term_months": 360})
        assert result.is_eligible
        rows = result.payment_plan.rows
        assert len(rows) == 360
        balances = [r.kalan_anapara for r in rows]
        assert all(a > b for a, b in zip(balances, balances[1:]))
        assert rows[-1].taksit_tutari == pytest.approx(rows[0].taksit_tutari, abs=1.0)


# ═══════════════════════════════════════════════════════════════════════════
# Individual supports
# ═══════════════════════════════════════════════════════════════════════════


class TestMachinerySupport:
    def test_known_values(self, machinery_inputs):
        r = calculate_incentives(machinery_inputs)
        assert r.region == 1
        assert r.machinery_support_amount == pytest.approx(1_250_000)          # 5M × 25%
        assert r.tax_reduction_investment_contribution == pytest.approx(4_375_000)  # (10M − 1.25M) × 50%
        assert r.vat_exemption_amount == pytest.approx(1_000_000)             # 5M × 20%
        assert r.customs_exemption_amount == pytest.approx(100_000)           # 2M × 5%
        assert r.sgk_employer_premium_support == pytest.approx(10_454_208.0)  # 96 × 2177.96 × 50
        assert r.sgk_employee_premium_support == 0
        assert r.total_support == pytest.approx(17_179_208.0)

    def test_capped_by_investment_ratio(self, machinery_inputs):
        inputs = _with(machinery_inputs, construction_cost=0, imported_machinery_cost=0,
                       domestic_machinery_cost=10_000_000)
        r = calculate_incentives(inputs)
        assert r.machinery_support_amount == pytest.approx(1_500_000)  # 10M × 15% < 10M × 25%

    def test_capped_by_monetary_limit(self, machinery_inputs):
        inputs = _with(machinery_inputs, construction_cost=0, imported_machinery_cost=0,
                       domestic_machinery_cost=2_000_000_000)
        r = calculate_incentives(inputs)
        assert r.machinery_support_amount == 240_000_000

    def test_strategic_monetary_limit(self, machinery_inputs):
        inputs = _with(machinery_inputs, incentive_type="Strategic Initiative",
                       construction_cost=0, imported_machinery_cost=0,
                       domestic_machinery_cost=2_000_000_000)
        r = calculate_incentives(inputs)
        assert r.machinery_support_amount == 180_000_000
        # Strategic contribution rate is 40%
        assert r.tax_reduction_investment_contribution == pytest.approx((2_000_000_000 - 180_000_000) * 0.40)


class TestInterestSupport:
    def test_uses_payment_plan_interest(self, interest_inputs):
        r = calculate_incentives(interest_inputs)
        assert r.machinery_support_amount == 0
        plan = r.payment_plan
        assert plan is not None
        assert len(plan.rows) == 60
        # 45% × 0.40 = 18 pp, below the 20 pp ceiling
        assert r.interest_profit_share_support_amount == round(plan.total_interest * 18 / 100, 2)
        assert r.tax_reduction_investment_contribution == pytest.approx(
            (10_000_000 - r.interest_profit_share_support_amount) * 0.50, abs=0.01,
        )

    def test_rate_ceiling(self, interest_inputs):
        r = calculate_incentives(_with(interest_inputs, bank_interest_rate=60, loan_amount=3_000_000))
        # 60% × 0.40 = 24 pp → capped at 20 pp
        assert r.interest_profit_share_support_amount == round(r.payment_plan.total_interest * 20 / 100, 2)

    def test_capped_by_investment_ratio(self, interest_inputs):
        r = calculate_incentives(_with(interest_inputs, loan_amount=50_000_000))
        assert r.interest_profit_share_support_amount == pytest.approx(2_000_000)  # 10M × 20%

    def test_payment_plan_uses_levy_overrides(self, interest_inputs):
        r = calculate_incentives(interest_inputs, bsmv_rate=0.0, kkdf_rate=0.0)
        assert r.payment_plan.total_bsmv == 0
        assert r.payment_plan.total_kkdf == 0


class TestTaxReductionDeclined:
    def test_uplifted_machinery_caps(self, machinery_inputs):
        declined = _with(machinery_inputs, tax_reduction_support=TaxReductionSupport.NO)
        r = calculate_incentives(declined)
        assert r.tax_reduction_investment_contribution == 0
        assert r.machinery_support_amount == pytest.approx(1_500_000)  # 5M × 30%
        assert any("artırılmış oran" in w for w in r.warning_messages)

    def test_uplift_exceeds_standard(self, machinery_inputs):
        inputs = _with(machinery_inputs, construction_cost=0, imported_machinery_cost=0,
                       domestic_machinery_cost=2_000_000_000)
        claimed = calculate_incentives(inputs)
        declined = calculate_incentives(_with(inputs, tax_reduction_support=TaxReductionSupport.NO))
        assert declined.machinery_support_amount > claimed.machinery_support_amount
        assert declined.machinery_support_amount == 300_000_000

    def test_uplifted_interest_ceiling(self, interest_inputs):
        inputs = _with(interest_inputs, bank_interest_rate=60, loan_amount=3_000_000,
                       tax_reduction_support=TaxReductionSupport.NO)
        r = calculate_incentives(inputs)
        # 24 pp is under the uplifted 25 pp ceiling
        assert r.interest_profit_share_support_amount == round(r.payment_plan.total_interest * 24 / 100, 2)

    def test_uplift_tables_strictly_greater(self):
        for t, rule in DEFAULT_RULES.machinery_support.items():
            up = DEFAULT_RULES.uplifted_machinery_support[t]
            assert up.monetary_cap > rule.monetary_cap
            assert up.investment_cap_ratio > rule.investment_cap_ratio
        for t, rule in DEFAULT_RULES.interest_support.items():
            up = DEFAULT_RULES.uplifted_interest_support[t]
            assert up.monetary_cap > rule.monetary_cap
            assert up.max_support_rate > rule.max_support_rate


class TestSgkSupport:
    def test_region_6_schedule(self, machinery_inputs):
        r = calculate_incentives(_with(machinery_inputs, province="Van"))
        assert r.region == 6
        assert r.sgk_employer_premium_support == pytest.approx(31_362_624.0)  # 144 × 4355.92 × 50
        assert r.sgk_employee_premium_support == pytest.approx(21_844_620.0)  # 120 × 3640.77 × 50

    def test_zero_employees(self, machinery_inputs):
        r = calculate_incentives(_with(machinery_inputs, number_of_employees=0))
        assert r.sgk_employer_premium_support == 0
        assert any("Çalışan sayısı 0" in w for w in r.warning_messages)

    def test_unknown_province(self, machinery_inputs):
        r = calculate_incentives(_with(machinery_inputs, province="Atlantis"))
        assert r.region is None
        assert r.sgk_employer_premium_support == 0
        assert any("Atlantis" in w for w in r.warning_messages)
        # Other supports are unaffected
        assert r.machinery_support_amount > 0

    def test_earthquake_zone_manufacturing_gets_region_6(self, machinery_inputs):
        inputs = _with(machinery_inputs, province="Gaziantep", nace_code="26.11", osb_status="DIŞI")
        r = calculate_incentives(inputs)
        assert r.region == 6
        assert r.sgk_employee_premium_support > 0

    def test_earthquake_zone_needs_sector(self, machinery_inputs):
        r = calculate_incentives(_with(machinery_inputs, province="Gaziantep"))
        assert r.region == 3
        assert r.sgk_employee_premium_support == 0


class TestCategoricalExclusion:
    def test_istanbul_mining_suppressed(self, machinery_inputs):
        inputs = _with(machinery_inputs, province="İstanbul", nace_code="05.10")
        r = calculate_incentives(inputs)
        assert r.is_eligible
        assert r.support_suppressed
        assert r.total_fixed_investment == 10_000_000
        assert r.total_support == 0
        assert all(v == 0 for v in r.support_parts().values())
        assert any("madencilik" in w for w in r.warning_messages)

    def test_mining_elsewhere_supported(self, machinery_inputs):
        r = calculate_incentives(_with(machinery_inputs, province="Zonguldak", nace_code="05.10"))
        assert not r.support_suppressed
        assert r.total_support > 0


class TestMissingRules:
    def test_missing_machinery_rule(self, machinery_inputs):
        rules = replace(DEFAULT_RULES, machinery_support=MappingProxyType({}))
        r = calculate_incentives(machinery_inputs, rules=rules)
        assert r.machinery_support_amount == 0
        assert any("kural tablosunda kayıt bulunamadı" in w for w in r.warning_messages)

    def test_missing_sgk_schedule(self, machinery_inputs):
        rules = replace(DEFAULT_RULES, sgk_schedules=MappingProxyType({}))
        r = calculate_incentives(machinery_inputs, rules=rules)
        assert r.sgk_employer_premium_support == 0
        assert r.machinery_support_amount > 0

    def test_missing_tax_rate(self, machinery_inputs):
        rules = replace(DEFAULT_RULES, tax_reduction_rates=MappingProxyType({}))
        r = calculate_incentives(machinery_inputs, rules=rules)
        assert r.tax_reduction_investment_contribution == 0
        assert r.warning_messages


class TestInvariants:
    @pytest.mark.parametrize("preference", list(SupportPreference))
    @pytest.mark.parametrize("tax", list(TaxReductionSupport))
    def test_total_is_rounded_sum(self, interest_inputs, preference, tax):
        r = calculate_incentives(_with(interest_inputs, support_preference=preference,
                                       tax_reduction_support=tax))
        assert r.total_support == round(sum(r.support_parts().values()), 2)

    @pytest.mark.parametrize("preference", list(SupportPreference))
    def test_only_one_financial_support(self, interest_inputs, preference):
        r = calculate_incentives(_with(interest_inputs, support_preference=preference))
        assert min(r.machinery_support_amount, r.interest_profit_share_support_amount) == 0

    def test_idempotent(self, interest_inputs):
        a = calculate_incentives(interest_inputs)
        b = calculate_incentives(interest_inputs)
        assert a == b

    def test_exemption_flags(self, machinery_inputs):
        r = calculate_incentives(machinery_inputs)
        assert r.vat_customs_exemption == "MEVCUT"
        assert r.vat_exemption_eligible and r.customs_exemption_eligible

        domestic_only = calculate_incentives(_with(machinery_inputs, imported_machinery_cost=0))
        assert domestic_only.vat_exemption_eligible
        assert not domestic_only.customs_exemption_eligible
        assert domestic_only.customs_exemption_amount == 0
