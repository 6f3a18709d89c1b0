"""Sector / location query types.

Rates and caps that may not apply to a region or sector are modelled as a
tagged ``Amount | NotApplicable`` value instead of an "N/A" string, so no
consumer can parse a missing value as zero.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from tesvik_engine.config.enums import OsbStatus


# ═══════════════════════════════════════════════════════════════════════════
# Amount | NotApplicable
# ═══════════════════════════════════════════════════════════════════════════

class Amount(BaseModel):
    kind: Literal["amount"] = "amount"
    value: float


class NotApplicable(BaseModel):
    kind: Literal["not_applicable"] = "not_applicable"
    reason: str = ""


SupportValue = Annotated[Union[Amount, NotApplicable], Field(discriminator="kind")]


def amount_or_na(value: float | None, reason: str = "") -> Amount | NotApplicable:
    """Wrap an optional lookup value."""
    if value is None:
        return NotApplicable(reason=reason)
    return Amount(value=value)


# ═══════════════════════════════════════════════════════════════════════════
# Lookup records (what the data source returns)
# ═══════════════════════════════════════════════════════════════════════════

class SectorRecord(BaseModel):
    """One row of the sector catalogue."""

    nace_code: str
    name: str
    is_target: bool = False
    is_priority: bool = False
    is_high_tech: bool = False
    is_mid_high_tech: bool = False
    conditions: str = ""
    min_investment_by_region: dict[int, float] = Field(default_factory=dict)
    """Minimum fixed investment per region (1–6)."""

    def min_investment(self, region: int) -> float:
        return self.min_investment_by_region.get(region, 0.0)


class LocationSupportRecord(BaseModel):
    """Support rates for a province/district.  ``None`` = not applicable."""

    province: str
    district: str = ""
    vat_exemption: bool = True
    customs_exemption: bool = True
    target_tax_discount: float | None = None
    target_interest_support: float | None = None
    target_cap: float | None = None
    target_cap_ratio: float | None = None
    priority_tax_discount: float | None = None
    priority_interest_support: float | None = None
    priority_cap: float | None = None
    priority_cap_ratio: float | None = None


class SgkDurationRecord(BaseModel):
    years: int | None
    """None when SGK support does not apply at this location."""
    subregion: str = ""


# ═══════════════════════════════════════════════════════════════════════════
# Query result
# ═══════════════════════════════════════════════════════════════════════════

class SectorInfo(BaseModel):
    nace_code: str
    name: str
    is_target: bool
    is_priority: bool
    is_high_tech: bool
    is_mid_high_tech: bool
    conditions: str
    min_investment: float


class SpecialProgram(BaseModel):
    """Region-6 override programme (earthquake zone / attraction centres)."""

    is_eligible: bool
    program_type: Literal["earthquake_zone", "cazibe_merkezleri"] | None = None
    description: str = ""
    original_region: int | None = None
    applied_region: int | None = None


class LocationInfo(BaseModel):
    province: str
    district: str
    osb_status: OsbStatus
    region: int = Field(ge=1, le=6)
    """Effective region (6 when a special programme applies)."""
    original_region: int | None = None
    """Base region of the province, kept for display when overridden."""
    subregion: str = ""
    sgk_duration: str
    special_program: SpecialProgram | None = None


class SupportsInfo(BaseModel):
    vat_exemption: bool
    customs_exemption: bool
    target_tax_discount: SupportValue
    target_interest_support: SupportValue
    target_cap: SupportValue
    target_cap_ratio: SupportValue
    priority_tax_discount: SupportValue
    priority_interest_support: SupportValue
    priority_cap: SupportValue
    priority_cap_ratio: SupportValue


class IncentiveResult(BaseModel):
    sector: SectorInfo
    location: LocationInfo
    supports: SupportsInfo
    warnings: list[str] = Field(default_factory=list)
    categorically_unsupported: bool = False


class LocationClassification(BaseModel):
    """Region of one location, after any special-programme override."""

    province: str
    district: str
    osb_status: OsbStatus
    base_region: int = Field(ge=1, le=6)
    region: int = Field(ge=1, le=6)
    special_program: SpecialProgram
    province_known: bool = True
    """False when the province was not found and region 1 was assumed."""
