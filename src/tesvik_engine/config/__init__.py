"""Configuration — calculator inputs, enums, rule tables and runtime settings."""

from tesvik_engine.config.enums import (
    IncentiveType,
    OsbStatus,
    RegionClass,
    SupportPreference,
    TaxReductionSupport,
)
from tesvik_engine.config.calculator import IncentiveCalculatorInputs
from tesvik_engine.config.rules import DEFAULT_RULES, RuleSet
from tesvik_engine.config.settings import Settings, settings

__all__ = [
    "IncentiveType",
    "OsbStatus",
    "RegionClass",
    "SupportPreference",
    "TaxReductionSupport",
    "IncentiveCalculatorInputs",
    "RuleSet",
    "DEFAULT_RULES",
    "Settings",
    "settings",
]
