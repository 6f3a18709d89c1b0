"""Shared test fixtures — sample calculator forms and the packaged data source."""

from __future__ import annotations

from typing import Any

import pytest

from tesvik_engine.config import IncentiveCalculatorInputs
from tesvik_engine.data.source import StaticDataSource, default_data_source


@pytest.fixture
def machinery_form() -> dict[str, Any]:
    """Technology initiative in Ankara (region 1), TFI 10M, machinery support."""
    return {
        "incentive_type": "Technology Initiative",
        "province": "Ankara",
        "number_of_employees": 50,
        "land_cost": 0,
        "construction_cost": 5_000_000,
        "imported_machinery_cost": 2_000_000,
        "domestic_machinery_cost": 3_000_000,
        "other_expenses": 0,
        "support_preference": "Machinery Support",
        "tax_reduction_support": "Yes",
    }


@pytest.fixture
def interest_form(machinery_form: dict[str, Any]) -> dict[str, Any]:
    """Same investment, interest/profit-share support on a 5M / 60-month loan at 45%."""
    return {
        **machinery_form,
        "support_preference": "Interest/Profit Share Support",
        "bank_interest_rate": 45,
        "loan_amount": 5_000_000,
        "loan_term_months": 60,
    }


@pytest.fixture
def machinery_inputs(machinery_form: dict[str, Any]) -> IncentiveCalculatorInputs:
    return IncentiveCalculatorInputs(**machinery_form)


@pytest.fixture
def interest_inputs(interest_form: dict[str, Any]) -> IncentiveCalculatorInputs:
    return IncentiveCalculatorInputs(**interest_form)


@pytest.fixture
def source() -> StaticDataSource:
    return default_data_source()


@pytest.fixture
def electronics(source: StaticDataSource):
    """26.11 — manufacturing, target + priority, high tech."""
    return source.sector("26.11")


@pytest.fixture
def dairy(source: StaticDataSource):
    """10.51 — manufacturing, target only."""
    return source.sector("10.51")


@pytest.fixture
def coal_mining(source: StaticDataSource):
    return source.sector("05.10")


@pytest.fixture
def solar_wind(source: StaticDataSource):
    return source.sector("35.12")


@pytest.fixture
def rnd(source: StaticDataSource):
    """72.19 — priority, not manufacturing."""
    return source.sector("72.19")
