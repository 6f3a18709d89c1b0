"""Province → development region (1–6) map and per-region support defaults.

The region map follows the six-region socio-economic classification used by
the investment incentive decree (81 provinces).  ``REGION_SUPPORTS`` holds
the region-level rates a location inherits unless a district-level record
overrides it; ``None`` marks a support that does not apply in that region.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from tesvik_engine.models.incentive import LocationSupportRecord


_REGIONS: dict[int, tuple[str, ...]] = {
    1: ("Ankara", "Antalya", "Bursa", "Eskişehir", "İstanbul", "İzmir", "Kocaeli", "Muğla"),
    2: ("Adana", "Aydın", "Bolu", "Çanakkale", "Denizli", "Edirne", "Isparta", "Kayseri",
        "Kırklareli", "Konya", "Sakarya", "Tekirdağ", "Yalova"),
    3: ("Balıkesir", "Bilecik", "Burdur", "Gaziantep", "Karabük", "Karaman", "Manisa",
        "Mersin", "Samsun", "Trabzon", "Uşak", "Zonguldak"),
    4: ("Afyonkarahisar", "Amasya", "Artvin", "Bartın", "Çorum", "Düzce", "Elazığ",
        "Erzincan", "Hatay", "Kastamonu", "Kırıkkale", "Kırşehir", "Kütahya", "Malatya",
        "Nevşehir", "Rize", "Sivas"),
    5: ("Adıyaman", "Aksaray", "Bayburt", "Çankırı", "Erzurum", "Giresun", "Gümüşhane",
        "Kahramanmaraş", "Kilis", "Niğde", "Ordu", "Osmaniye", "Sinop", "Tokat", "Tunceli",
        "Yozgat"),
    6: ("Ağrı", "Ardahan", "Batman", "Bingöl", "Bitlis", "Diyarbakır", "Hakkari", "Iğdır",
        "Kars", "Mardin", "Muş", "Siirt", "Şanlıurfa", "Şırnak", "Van"),
}

PROVINCE_REGIONS: Mapping[str, int] = MappingProxyType({
    province: region
    for region, provinces in _REGIONS.items()
    for province in provinces
})

# Alternative spellings seen in form data.
PROVINCE_ALIASES: Mapping[str, str] = MappingProxyType({
    "İçel": "Mersin",
    "İçel (Mersin)": "Mersin",
    "Hakkâri": "Hakkari",
    "Afyon": "Afyonkarahisar",
})


def canonical_province(name: str) -> str:
    name = name.strip()
    return PROVINCE_ALIASES.get(name, name)


def _region_support(
    region: int,
    target_tax: float,
    target_interest: float | None,
    target_cap_ratio: float | None,
    priority_tax: float,
    priority_interest: float,
) -> LocationSupportRecord:
    return LocationSupportRecord(
        province=f"{region}. Bölge",
        target_tax_discount=target_tax,
        target_interest_support=target_interest,
        target_cap=240_000_000 if target_interest is not None else None,
        target_cap_ratio=target_cap_ratio,
        priority_tax_discount=priority_tax,
        priority_interest_support=priority_interest,
        priority_cap=240_000_000,
        priority_cap_ratio=0.20,
    )


# Regions 1–3 grant no interest support to target investments.
REGION_SUPPORTS: Mapping[int, LocationSupportRecord] = MappingProxyType({
    1: _region_support(1, 0.20, None, None, 0.30, 0.25),
    2: _region_support(2, 0.25, None, None, 0.35, 0.30),
    3: _region_support(3, 0.30, None, None, 0.40, 0.35),
    4: _region_support(4, 0.35, 0.25, 0.15, 0.45, 0.40),
    5: _region_support(5, 0.40, 0.35, 0.20, 0.50, 0.45),
    6: _region_support(6, 0.50, 0.50, 0.25, 0.55, 0.50),
})
