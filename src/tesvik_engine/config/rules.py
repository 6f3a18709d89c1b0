"""Rule tables — static incentive rates, caps and thresholds.

Every table is an immutable mapping keyed by enum values (or enum tuples),
built once at import time.  The calculator only ever reads them through a
``RuleSet`` so tests and callers can inject alternative tables.

Monetary caps are in TRY.  Ratios are fractions (0.15 = 15%) except
``InterestSupportRule.max_support_rate`` which, like the bank rate it is
compared against, is in percentage points.

Caps used when the tax-reduction contribution is declined
(``TaxReductionSupport.NO``) live in their own ``UPLIFTED_*`` tables.  The
replacement values are fixed business constants; confirm with the programme
owners before changing any of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

from tesvik_engine.config.enums import IncentiveType, RegionClass


_T = IncentiveType.TECHNOLOGY
_L = IncentiveType.LOCAL_DEVELOPMENT
_S = IncentiveType.STRATEGIC


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True)


class SgkSchedule(_Rule):
    """SGK premium support: months covered × monthly premium, per employee."""

    employer_months: int
    employer_monthly_premium: float
    employee_months: int
    employee_monthly_premium: float


class MachinerySupportRule(_Rule):
    """Machinery support = min(machinery × support_rate, TFI × ratio, monetary cap)."""

    support_rate: float
    investment_cap_ratio: float
    monetary_cap: float


class InterestSupportRule(_Rule):
    """Interest/profit-share support.

    support rate (pp) = min(bank rate × rate_multiplier, max_support_rate);
    amount = total loan interest × rate, capped by TFI × ratio and monetary cap.
    """

    rate_multiplier: float
    max_support_rate: float
    investment_cap_ratio: float
    monetary_cap: float


class ExemptionRule(_Rule):
    """VAT applies to all machinery; customs duty only to imported machinery."""

    vat_rate: float
    customs_rate: float


# ═══════════════════════════════════════════════════════════════════════════
# Thresholds
# ═══════════════════════════════════════════════════════════════════════════

MINIMUM_FIXED_INVESTMENT: Mapping[IncentiveType, float] = MappingProxyType({
    _T: 6_000_000,
    _L: 6_000_000,
    _S: 50_000_000,
})


# ═══════════════════════════════════════════════════════════════════════════
# SGK premium support
# ═══════════════════════════════════════════════════════════════════════════

SGK_EMPLOYER_PREMIUM_RATE = 4355.92
SGK_EMPLOYEE_PREMIUM_RATE = 3640.77

_SGK_STANDARD = SgkSchedule(
    employer_months=96,
    employer_monthly_premium=SGK_EMPLOYER_PREMIUM_RATE / 2,
    employee_months=0,
    employee_monthly_premium=0.0,
)
_SGK_REGION_6 = SgkSchedule(
    employer_months=144,
    employer_monthly_premium=SGK_EMPLOYER_PREMIUM_RATE,
    employee_months=120,
    employee_monthly_premium=SGK_EMPLOYEE_PREMIUM_RATE,
)

SGK_SCHEDULES: Mapping[tuple[IncentiveType, RegionClass], SgkSchedule] = MappingProxyType({
    (t, rc): (_SGK_REGION_6 if rc is RegionClass.REGION_6 else _SGK_STANDARD)
    for t in IncentiveType
    for rc in RegionClass
})


# ═══════════════════════════════════════════════════════════════════════════
# Tax reduction investment contribution
# ═══════════════════════════════════════════════════════════════════════════

TAX_REDUCTION_RATES: Mapping[IncentiveType, float] = MappingProxyType({
    _T: 0.50,
    _L: 0.50,
    _S: 0.40,
})


# ═══════════════════════════════════════════════════════════════════════════
# Machinery support caps
# ═══════════════════════════════════════════════════════════════════════════

MACHINERY_SUPPORT: Mapping[IncentiveType, MachinerySupportRule] = MappingProxyType({
    _T: MachinerySupportRule(support_rate=0.25, investment_cap_ratio=0.15, monetary_cap=240_000_000),
    _L: MachinerySupportRule(support_rate=0.25, investment_cap_ratio=0.15, monetary_cap=240_000_000),
    _S: MachinerySupportRule(support_rate=0.25, investment_cap_ratio=0.15, monetary_cap=180_000_000),
})

UPLIFTED_MACHINERY_SUPPORT: Mapping[IncentiveType, MachinerySupportRule] = MappingProxyType({
    _T: MachinerySupportRule(support_rate=0.30, investment_cap_ratio=0.20, monetary_cap=300_000_000),
    _L: MachinerySupportRule(support_rate=0.30, investment_cap_ratio=0.20, monetary_cap=300_000_000),
    _S: MachinerySupportRule(support_rate=0.30, investment_cap_ratio=0.20, monetary_cap=240_000_000),
})


# ═══════════════════════════════════════════════════════════════════════════
# Interest / profit-share support caps
# ═══════════════════════════════════════════════════════════════════════════

INTEREST_SUPPORT: Mapping[IncentiveType, InterestSupportRule] = MappingProxyType({
    _T: InterestSupportRule(rate_multiplier=0.40, max_support_rate=20,
                            investment_cap_ratio=0.20, monetary_cap=240_000_000),
    _L: InterestSupportRule(rate_multiplier=0.40, max_support_rate=20,
                            investment_cap_ratio=0.20, monetary_cap=240_000_000),
    _S: InterestSupportRule(rate_multiplier=0.30, max_support_rate=15,
                            investment_cap_ratio=0.15, monetary_cap=180_000_000),
})

UPLIFTED_INTEREST_SUPPORT: Mapping[IncentiveType, InterestSupportRule] = MappingProxyType({
    _T: InterestSupportRule(rate_multiplier=0.40, max_support_rate=25,
                            investment_cap_ratio=0.25, monetary_cap=300_000_000),
    _L: InterestSupportRule(rate_multiplier=0.40, max_support_rate=25,
                            investment_cap_ratio=0.25, monetary_cap=300_000_000),
    _S: InterestSupportRule(rate_multiplier=0.30, max_support_rate=20,
                            investment_cap_ratio=0.20, monetary_cap=240_000_000),
})


# ═══════════════════════════════════════════════════════════════════════════
# VAT / customs exemption
# ═══════════════════════════════════════════════════════════════════════════

EXEMPTION = ExemptionRule(vat_rate=0.20, customs_rate=0.05)


# ═══════════════════════════════════════════════════════════════════════════
# Region-6 override programmes (sector/location query path)
# ═══════════════════════════════════════════════════════════════════════════

class SpecialProgramRule(_Rule):
    """Reclassifies a qualifying investment to region 6.

    Applies when the base region is below 6, the province is listed, the
    district is allowed (``districts`` maps a province to its allowed
    districts; unlisted provinces allow every district), the OSB condition
    holds and, if ``manufacturing_only``, the NACE division is 10–33.
    """

    program_type: Literal["earthquake_zone", "cazibe_merkezleri"]
    description: str
    provinces: frozenset[str]
    requires_osb: bool = False
    manufacturing_only: bool = True
    districts: Mapping[str, frozenset[str]] = Field(default_factory=dict)


EARTHQUAKE_ZONE_PROVINCES = frozenset({
    "Adana", "Adıyaman", "Diyarbakır", "Elazığ", "Gaziantep", "Hatay",
    "Kahramanmaraş", "Kilis", "Malatya", "Osmaniye", "Şanlıurfa",
})

CAZIBE_MERKEZLERI_PROVINCES = frozenset({
    "Adıyaman", "Ağrı", "Ardahan", "Batman", "Bayburt", "Bingöl", "Bitlis",
    "Diyarbakır", "Elazığ", "Erzincan", "Erzurum", "Gümüşhane", "Hakkari",
    "Iğdır", "Kars", "Malatya", "Mardin", "Muş", "Siirt", "Şanlıurfa",
    "Şırnak", "Tunceli", "Van",
})

# Evaluated in order; the first matching programme wins.
SPECIAL_PROGRAMS: tuple[SpecialProgramRule, ...] = (
    SpecialProgramRule(
        program_type="earthquake_zone",
        description="Deprem bölgesi imalat yatırımları 6. bölge desteklerinden yararlanır.",
        provinces=EARTHQUAKE_ZONE_PROVINCES,
    ),
    SpecialProgramRule(
        program_type="cazibe_merkezleri",
        description="Cazibe Merkezleri Programı kapsamında OSB içindeki imalat "
                    "yatırımları 6. bölge desteklerinden yararlanır.",
        provinces=CAZIBE_MERKEZLERI_PROVINCES,
        requires_osb=True,
    ),
)


# ═══════════════════════════════════════════════════════════════════════════
# Bundle
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RuleSet:
    """All tables the calculator reads.  Swap individual tables with
    ``dataclasses.replace`` to model a different decree or a missing entry."""

    minimum_fixed_investment: Mapping[IncentiveType, float] = field(
        default_factory=lambda: MINIMUM_FIXED_INVESTMENT)
    sgk_schedules: Mapping[tuple[IncentiveType, RegionClass], SgkSchedule] = field(
        default_factory=lambda: SGK_SCHEDULES)
    tax_reduction_rates: Mapping[IncentiveType, float] = field(
        default_factory=lambda: TAX_REDUCTION_RATES)
    machinery_support: Mapping[IncentiveType, MachinerySupportRule] = field(
        default_factory=lambda: MACHINERY_SUPPORT)
    uplifted_machinery_support: Mapping[IncentiveType, MachinerySupportRule] = field(
        default_factory=lambda: UPLIFTED_MACHINERY_SUPPORT)
    interest_support: Mapping[IncentiveType, InterestSupportRule] = field(
        default_factory=lambda: INTEREST_SUPPORT)
    uplifted_interest_support: Mapping[IncentiveType, InterestSupportRule] = field(
        default_factory=lambda: UPLIFTED_INTEREST_SUPPORT)
    exemption: ExemptionRule = EXEMPTION
    special_programs: tuple[SpecialProgramRule, ...] = SPECIAL_PROGRAMS


DEFAULT_RULES = RuleSet()
