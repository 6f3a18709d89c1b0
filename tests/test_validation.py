"""Tests for the eligibility validator."""

import pytest
from pydantic import ValidationError

from tesvik_engine.config import IncentiveCalculatorInputs, IncentiveType
from tesvik_engine.engine.validator import validate_inputs


class TestEligibleForms:
    def test_machinery_form_is_eligible(self, machinery_form):
        outcome = validate_inputs(machinery_form)
        assert outcome.is_eligible
        assert outcome.validation_errors == []
        assert outcome.inputs is not None
        assert outcome.inputs.total_fixed_investment == 10_000_000

    def test_interest_form_is_eligible(self, interest_form):
        assert validate_inputs(interest_form).is_eligible

    def test_accepts_built_model(self, machinery_inputs):
        outcome = validate_inputs(machinery_inputs)
        assert outcome.is_eligible
        assert outcome.inputs is machinery_inputs

    def test_numeric_strings_are_coerced(self, machinery_form):
        form = {**machinery_form, "construction_cost": "5000000", "number_of_employees": "50"}
        assert validate_inputs(form).is_eligible

    def test_zero_employees_allowed(self, machinery_form):
        assert validate_inputs({**machinery_form, "number_of_employees": 0}).is_eligible

    def test_exactly_minimum_is_eligible(self, machinery_form):
        form = {**machinery_form, "construction_cost": 1_000_000}  # 1M + 5M machinery
        assert validate_inputs(form).is_eligible


class TestFieldErrors:
    def test_negative_cost(self, machinery_form):
        outcome = validate_inputs({**machinery_form, "land_cost": -1})
        assert not outcome.is_eligible
        assert "Arazi maliyeti negatif olamaz." in outcome.validation_errors
        assert outcome.inputs is None

    @pytest.mark.parametrize("value", ["inf", "nan", float("inf"), "-inf"])
    def test_non_finite_cost_rejected(self, machinery_form, value):
        outcome = validate_inputs({**machinery_form, "land_cost": value})
        assert not outcome.is_eligible
        assert outcome.inputs is None
        assert "Arazi maliyeti sayısal bir değer olmalıdır." in outcome.validation_errors

    def test_non_finite_loan_rejected(self, interest_form):
        outcome = validate_inputs({**interest_form, "loan_amount": "inf", "bank_interest_rate": "nan"})
        assert not outcome.is_eligible
        assert "Kredi tutarı sayısal bir değer olmalıdır." in outcome.validation_errors
        assert "Banka faiz oranı sayısal bir değer olmalıdır." in outcome.validation_errors

    def test_non_numeric_employees(self, machinery_form):
        outcome = validate_inputs({**machinery_form, "number_of_employees": "elli"})
        assert not outcome.is_eligible
        assert "Çalışan sayısı sayısal bir değer olmalıdır." in outcome.validation_errors

    def test_errors_are_accumulated(self, machinery_form):
        form = {
            **machinery_form,
            "land_cost": -5,
            "other_expenses": "abc",
            "number_of_employees": -3,
        }
        outcome = validate_inputs(form)
        assert not outcome.is_eligible
        assert len(outcome.validation_errors) == 3
        assert "Arazi maliyeti negatif olamaz." in outcome.validation_errors
        assert "Diğer giderler sayısal bir değer olmalıdır." in outcome.validation_errors
        assert "Çalışan sayısı negatif olamaz." in outcome.validation_errors

    def test_unknown_incentive_type(self, machinery_form):
        outcome = validate_inputs({**machinery_form, "incentive_type": "Regional Initiative"})
        assert not outcome.is_eligible
        assert any(e.startswith("Teşvik türü için geçersiz seçim") for e in outcome.validation_errors)

    def test_unknown_support_preference(self, machinery_form):
        outcome = validate_inputs({**machinery_form, "support_preference": "Both"})
        assert not outcome.is_eligible
        assert any(e.startswith("Destek tercihi") for e in outcome.validation_errors)


class TestMinimumFixedInvestment:
    def test_below_minimum(self, machinery_form):
        form = {**machinery_form, "construction_cost": 0, "imported_machinery_cost": 0,
                "domestic_machinery_cost": 1_000_000}
        outcome = validate_inputs(form)
        assert not outcome.is_eligible
        assert outcome.validation_errors == [
            "Toplam sabit yatırım tutarı minimum 6.000.000 TL olmalıdır. "
            "Mevcut tutar: 1.000.000 TL"
        ]
        # The form parsed, so the inputs are still returned
        assert outcome.inputs is not None

    def test_strategic_minimum_is_higher(self, machinery_form):
        form = {**machinery_form, "incentive_type": IncentiveType.STRATEGIC.value}
        outcome = validate_inputs(form)
        assert not outcome.is_eligible
        assert "minimum 50.000.000 TL" in outcome.validation_errors[0]

    def test_minimum_checked_alongside_field_errors(self, machinery_form):
        form = {**machinery_form, "construction_cost": 0, "imported_machinery_cost": 0,
                "domestic_machinery_cost": 100, "number_of_employees": "x"}
        outcome = validate_inputs(form)
        assert len(outcome.validation_errors) == 2
        assert any("minimum" in e for e in outcome.validation_errors)


class TestLoanDetails:
    def test_interest_requires_loan_amount(self, interest_form):
        outcome = validate_inputs({**interest_form, "loan_amount": 0})
        assert not outcome.is_eligible
        assert outcome.validation_errors == [
            "Faiz/Kar Payı Desteği için kredi tutarı 0'dan büyük olmalıdır."
        ]

    def test_interest_requires_loan_term(self, interest_form):
        outcome = validate_inputs({**interest_form, "loan_term_months": 0})
        assert outcome.validation_errors == [
            "Faiz/Kar Payı Desteği için kredi vadesi 0'dan büyük olmalıdır."
        ]

    def test_machinery_ignores_loan(self, machinery_form):
        assert validate_inputs({**machinery_form, "loan_amount": 0}).is_eligible


class TestInputsModel:
    def test_frozen(self, machinery_inputs):
        with pytest.raises(ValidationError):
            machinery_inputs.land_cost = 1

    def test_totals(self, machinery_inputs):
        assert machinery_inputs.total_machinery_cost == 5_000_000
        assert machinery_inputs.total_fixed_investment == 10_000_000

    def test_defaults(self):
        inputs = IncentiveCalculatorInputs()
        assert inputs.bank_interest_rate == 45
        assert inputs.loan_term_months == 60
