"""Enumerations shared by the calculator inputs and the rule tables.

Values are the exact strings the portal's forms submit, so a raw form
payload validates straight into these types.
"""

from __future__ import annotations

from enum import Enum


class IncentiveType(str, Enum):
    TECHNOLOGY = "Technology Initiative"
    LOCAL_DEVELOPMENT = "Local Development Initiative"
    STRATEGIC = "Strategic Initiative"


class SupportPreference(str, Enum):
    """Exactly one of the two financial supports can be taken."""

    INTEREST_PROFIT_SHARE = "Interest/Profit Share Support"
    MACHINERY = "Machinery Support"


class TaxReductionSupport(str, Enum):
    YES = "Yes"
    NO = "No"


class OsbStatus(str, Enum):
    """Organized Industrial Zone (OSB) / industrial area status."""

    INSIDE = "İÇİ"
    OUTSIDE = "DIŞI"


class RegionClass(str, Enum):
    """Region-derived classification used by the SGK schedule table.

    Region 6 provinces get the long employer + employee premium schedule;
    every other region shares the standard one.
    """

    STANDARD = "standard"
    REGION_6 = "region_6"

    @classmethod
    def from_region(cls, region: int) -> "RegionClass":
        return cls.REGION_6 if region == 6 else cls.STANDARD
