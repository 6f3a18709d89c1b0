"""Data lookup — province regions, location support rates, SGK durations, sectors.

The engine only depends on the read-only ``IncentiveDataSource`` protocol.
``StaticDataSource`` serves the packaged defaults (and accepts overrides), so
the calculator and the query path work without any backend.

Sector catalogue CSV columns (header row required):
  nace_kodu, sektor, hedef_yatirim, oncelikli_yatirim, yuksek_teknoloji,
  orta_yuksek_teknoloji, sartlar, bolge_1 … bolge_6
Flags are ``Evet`` / ``Hayır``.
"""

from __future__ import annotations

import csv
import io
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Mapping, Protocol

from tesvik_engine.config.enums import OsbStatus, RegionClass
from tesvik_engine.config.rules import SGK_SCHEDULES
from tesvik_engine.data.provinces import (
    PROVINCE_REGIONS,
    REGION_SUPPORTS,
    canonical_province,
)
from tesvik_engine.models.incentive import (
    LocationSupportRecord,
    SectorRecord,
    SgkDurationRecord,
)

logger = logging.getLogger(__name__)


class IncentiveDataSource(Protocol):
    """Read-only lookups the engine consumes."""

    def provinces(self) -> list[str]: ...

    def province_region(self, province: str) -> int | None: ...

    def region_support(self, region: int) -> LocationSupportRecord | None: ...

    def location_support(self, province: str, district: str) -> LocationSupportRecord | None: ...

    def sgk_duration(
        self, province: str, district: str, osb_status: OsbStatus, region: int | None = None,
    ) -> SgkDurationRecord | None: ...

    def sector(self, nace_code: str) -> SectorRecord | None: ...

    def search_sectors(self, query: str, limit: int = 20) -> list[SectorRecord]: ...


# ═══════════════════════════════════════════════════════════════════════════
# Sector CSV ingestion
# ═══════════════════════════════════════════════════════════════════════════

def _flag(value: str | None) -> bool:
    return str(value or "").strip().lower() in ("evet", "true", "1", "yes")


def load_sectors_csv(source: str | Path | io.StringIO) -> list[SectorRecord]:
    """Parse a sector catalogue CSV.  Malformed rows are skipped."""
    rows = _read_csv(source)
    records: list[SectorRecord] = []
    for row in rows:
        try:
            records.append(SectorRecord(
                nace_code=str(row["nace_kodu"]).strip(),
                name=str(row["sektor"]).strip(),
                is_target=_flag(row.get("hedef_yatirim")),
                is_priority=_flag(row.get("oncelikli_yatirim")),
                is_high_tech=_flag(row.get("yuksek_teknoloji")),
                is_mid_high_tech=_flag(row.get("orta_yuksek_teknoloji")),
                conditions=str(row.get("sartlar") or "").strip(),
                min_investment_by_region={
                    region: float(row[f"bolge_{region}"])
                    for region in range(1, 7)
                    if row.get(f"bolge_{region}") not in (None, "", "N/A")
                },
            ))
        except (ValueError, KeyError, TypeError):
            logger.warning("Skipping malformed sector row: %r", row)
            continue
    return records


def load_default_sectors() -> list[SectorRecord]:
    text = resources.files("tesvik_engine.data").joinpath("sectors.csv").read_text(encoding="utf-8")
    return load_sectors_csv(io.StringIO(text))


def _read_csv(source: str | Path | io.StringIO) -> list[dict[str, str]]:
    """Read CSV from file path or StringIO, returning list of dicts."""
    if isinstance(source, io.StringIO):
        source.seek(0)
        reader = csv.DictReader(source)
        return list(reader)
    path = Path(source)
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        return list(reader)


def _fold(text: str) -> str:
    """Case-fold with Turkish dotted/dotless I handled."""
    return text.replace("İ", "i").replace("I", "ı").lower()


# ═══════════════════════════════════════════════════════════════════════════
# Static source
# ═══════════════════════════════════════════════════════════════════════════

REGION_1_OUTSIDE_OSB_SGK = "1. Bölgede OSB/EB Dışı yatırımlarda SGK desteği uygulanmamaktadır"


class StaticDataSource:
    """In-memory data source built from the packaged defaults.

    ``location_overrides`` and ``subregions`` are keyed by
    ``(province, district)``; anything not overridden inherits the
    region-level record.
    """

    def __init__(
        self,
        province_regions: Mapping[str, int] = PROVINCE_REGIONS,
        region_supports: Mapping[int, LocationSupportRecord] = REGION_SUPPORTS,
        location_overrides: Mapping[tuple[str, str], LocationSupportRecord] | None = None,
        subregions: Mapping[tuple[str, str], str] | None = None,
        sectors: list[SectorRecord] | None = None,
    ) -> None:
        self._province_regions = province_regions
        self._region_supports = region_supports
        self._location_overrides = dict(location_overrides or {})
        self._subregions = dict(subregions or {})
        sector_list = sectors if sectors is not None else load_default_sectors()
        self._sectors = {s.nace_code: s for s in sector_list}

    def provinces(self) -> list[str]:
        return sorted(self._province_regions, key=_fold)

    def province_region(self, province: str) -> int | None:
        return self._province_regions.get(canonical_province(province))

    def region_support(self, region: int) -> LocationSupportRecord | None:
        return self._region_supports.get(region)

    def location_support(self, province: str, district: str) -> LocationSupportRecord | None:
        province = canonical_province(province)
        override = self._location_overrides.get((province, district))
        if override is not None:
            return override
        region = self.province_region(province)
        base = self.region_support(region) if region is not None else None
        if base is None:
            logger.info("No location support record for %s / %s", province, district)
            return None
        return base.model_copy(update={"province": province, "district": district})

    def sgk_duration(
        self,
        province: str,
        district: str,
        osb_status: OsbStatus,
        region: int | None = None,
    ) -> SgkDurationRecord | None:
        """SGK support duration; ``region`` overrides the province's own region."""
        province = canonical_province(province)
        if region is None:
            region = self.province_region(province)
        if region is None:
            return None
        subregion = self._subregions.get((province, district), "")
        if region == 1 and osb_status is OsbStatus.OUTSIDE:
            return SgkDurationRecord(years=None, subregion=subregion)
        # SGK months do not vary by incentive type, so any type's schedule will do.
        region_class = RegionClass.from_region(region)
        for (_, rc), schedule in SGK_SCHEDULES.items():
            if rc is region_class:
                return SgkDurationRecord(years=schedule.employer_months // 12, subregion=subregion)
        return None

    def sector(self, nace_code: str) -> SectorRecord | None:
        return self._sectors.get(nace_code.strip())

    def search_sectors(self, query: str, limit: int = 20) -> list[SectorRecord]:
        """Match NACE code prefix or a case-insensitive name substring."""
        q = _fold(query.strip())
        if not q:
            return list(self._sectors.values())[:limit]
        hits = [
            s for s in self._sectors.values()
            if s.nace_code.startswith(q) or q in _fold(s.name)
        ]
        return hits[:limit]


@lru_cache(maxsize=1)
def default_data_source() -> StaticDataSource:
    """Shared source over the packaged defaults (sector CSV parsed once)."""
    return StaticDataSource()
