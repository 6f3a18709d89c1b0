"""Region classification — sector/location incentive query.

Steps for one query:
  1. Base region from the province → region map
  2. Special programme check (earthquake zone / cazibe merkezleri):
     eligible → effective region 6, original region kept, sector flipped
     from target to priority investment
  3. Location support rates for the effective region, with "not applicable"
     made explicit
  4. Categorical rules (mining in İstanbul, İstanbul target investments,
     GES/RES) surface as warnings instead of silent zeros

Entry points:
  - ``classify_location(province, district, osb_status, nace_code)``
  - ``query_incentives(sector, province, district, osb_status)``
"""

from __future__ import annotations

import logging

from tesvik_engine.config.enums import OsbStatus
from tesvik_engine.config.rules import DEFAULT_RULES, RuleSet, SpecialProgramRule
from tesvik_engine.data.provinces import canonical_province
from tesvik_engine.data.source import (
    REGION_1_OUTSIDE_OSB_SGK,
    IncentiveDataSource,
    default_data_source,
)
from tesvik_engine.models.incentive import (
    IncentiveResult,
    LocationClassification,
    LocationInfo,
    LocationSupportRecord,
    NotApplicable,
    SectorInfo,
    SectorRecord,
    SpecialProgram,
    SupportsInfo,
    amount_or_na,
)

logger = logging.getLogger(__name__)


MINING_NACE_PREFIXES = ("05", "06", "07", "08", "09")
RES_GES_NACE_CODES = ("35.12", "35.12.00")
RES_GES_KEYWORDS = ("güneş", "ges", "res", "rüzgar")

ISTANBUL = "İstanbul"

ISTANBUL_MINING_WARNING = (
    "İstanbul ilinde madencilik yatırımları teşvik kapsamı dışındadır; "
    "destek hesaplaması yapılmamıştır."
)
ISTANBUL_TARGET_WARNING = (
    "İstanbul'daki hedef yatırımlar vergi indirimi desteğinden yararlanamaz."
)
RES_GES_NA_REASON = "Uygulanmaz (GES ve RES yatırımlarında)"
RES_GES_WARNING = "GES ve RES yatırımlarında faiz/kâr payı desteği uygulanmaz."
NO_LOCATION_DATA_REASON = "Lokasyon destek verisi bulunamadı"


# ═══════════════════════════════════════════════════════════════════════════
# Categorical rules
# ═══════════════════════════════════════════════════════════════════════════

def is_istanbul_mining_investment(province: str, nace_code: str) -> bool:
    """Mining (NACE divisions 05–09) in İstanbul is categorically unsupported."""
    if canonical_province(province) != ISTANBUL:
        return False
    return nace_code.strip().startswith(MINING_NACE_PREFIXES)


def is_res_ges_investment(sector: SectorRecord) -> bool:
    """Solar / wind power generation (NACE 35.12 with a GES/RES keyword)."""
    if sector.nace_code not in RES_GES_NACE_CODES:
        return False
    name = sector.name.lower()
    return any(keyword in name for keyword in RES_GES_KEYWORDS)


def is_istanbul_target_investment(province: str, is_target: bool) -> bool:
    return canonical_province(province) == ISTANBUL and is_target


def is_manufacturing(nace_code: str) -> bool:
    """NACE section C — divisions 10 through 33."""
    try:
        division = int(nace_code.strip()[:2])
    except ValueError:
        return False
    return 10 <= division <= 33


# ═══════════════════════════════════════════════════════════════════════════
# Special programmes
# ═══════════════════════════════════════════════════════════════════════════

def _program_applies(
    rule: SpecialProgramRule,
    province: str,
    district: str,
    osb_status: OsbStatus | None,
    nace_code: str,
    base_region: int,
) -> bool:
    if base_region >= 6 or province not in rule.provinces:
        return False
    allowed = rule.districts.get(province)
    if allowed is not None and district not in allowed:
        return False
    if rule.requires_osb and osb_status is not OsbStatus.INSIDE:
        return False
    if rule.manufacturing_only and not is_manufacturing(nace_code):
        return False
    return True


def evaluate_special_program(
    province: str,
    district: str,
    osb_status: OsbStatus | None,
    nace_code: str,
    base_region: int,
    rules: RuleSet = DEFAULT_RULES,
) -> SpecialProgram:
    """Return the first region-6 programme the investment qualifies for."""
    province = canonical_province(province)
    for rule in rules.special_programs:
        if _program_applies(rule, province, district, osb_status, nace_code, base_region):
            return SpecialProgram(
                is_eligible=True,
                program_type=rule.program_type,
                description=rule.description,
                original_region=base_region,
                applied_region=6,
            )
    return SpecialProgram(is_eligible=False)


def classify_location(
    province: str,
    district: str,
    osb_status: OsbStatus,
    nace_code: str,
    source: IncentiveDataSource | None = None,
    rules: RuleSet = DEFAULT_RULES,
) -> LocationClassification:
    """Base region plus any region-6 programme override.

    An unknown province is classified as region 1 with
    ``province_known=False``; callers decide how to surface that.
    """
    source = source or default_data_source()
    province = canonical_province(province)
    base_region = source.province_region(province)
    known = base_region is not None
    if base_region is None:
        logger.warning("Unknown province %r; defaulting to region 1", province)
        base_region = 1

    program = evaluate_special_program(
        province, district, osb_status, nace_code, base_region, rules,
    )
    return LocationClassification(
        province=province,
        district=district,
        osb_status=osb_status,
        base_region=base_region,
        region=6 if program.is_eligible else base_region,
        special_program=program,
        province_known=known,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Query
# ═══════════════════════════════════════════════════════════════════════════

def _supports_from_record(
    record: LocationSupportRecord | None,
    reason: str = NO_LOCATION_DATA_REASON,
) -> SupportsInfo:
    if record is None:
        na = NotApplicable(reason=reason)
        return SupportsInfo(
            vat_exemption=False, customs_exemption=False,
            target_tax_discount=na, target_interest_support=na,
            target_cap=na, target_cap_ratio=na,
            priority_tax_discount=na, priority_interest_support=na,
            priority_cap=na, priority_cap_ratio=na,
        )
    return SupportsInfo(
        vat_exemption=record.vat_exemption,
        customs_exemption=record.customs_exemption,
        target_tax_discount=amount_or_na(record.target_tax_discount),
        target_interest_support=amount_or_na(record.target_interest_support),
        target_cap=amount_or_na(record.target_cap),
        target_cap_ratio=amount_or_na(record.target_cap_ratio),
        priority_tax_discount=amount_or_na(record.priority_tax_discount),
        priority_interest_support=amount_or_na(record.priority_interest_support),
        priority_cap=amount_or_na(record.priority_cap),
        priority_cap_ratio=amount_or_na(record.priority_cap_ratio),
    )


def query_incentives(
    sector: SectorRecord,
    province: str,
    district: str,
    osb_status: OsbStatus,
    source: IncentiveDataSource | None = None,
    rules: RuleSet = DEFAULT_RULES,
) -> IncentiveResult:
    """Build the incentive result for one sector at one location.

    Never raises for missing data: unknown provinces fall back to region 1
    and missing support rows read as not applicable, each with a warning.
    """
    source = source or default_data_source()
    province = canonical_province(province)
    warnings: list[str] = []

    # ── 1–2. Base region and special programme override ───────────────
    location = classify_location(province, district, osb_status, sector.nace_code, source, rules)
    if not location.province_known:
        warnings.append(f"'{province}' için bölge bilgisi bulunamadı; 1. bölge varsayıldı.")
    program = location.special_program
    base_region = location.base_region
    region = location.region
    is_target = sector.is_target
    is_priority = sector.is_priority
    if program.is_eligible:
        is_target = False
        is_priority = True
        warnings.append(program.description)

    # ── 3. Location supports ──────────────────────────────────────────
    if program.is_eligible:
        record = source.region_support(6)
    else:
        record = source.location_support(province, district)
    if record is None:
        warnings.append(f"{province} / {district} için destek oranları bulunamadı.")
    supports = _supports_from_record(record)

    sgk = source.sgk_duration(province, district, osb_status, region=region)
    if sgk is None:
        sgk_text = "SGK destek süresi bulunamadı"
        warnings.append(sgk_text + ".")
        subregion = ""
    else:
        sgk_text = f"{sgk.years} yıl" if sgk.years is not None else REGION_1_OUTSIDE_OSB_SGK
        subregion = f"{sgk.subregion}. Alt Bölge" if sgk.subregion else ""

    # ── 4. Categorical rules ──────────────────────────────────────────
    unsupported = is_istanbul_mining_investment(province, sector.nace_code)
    if unsupported:
        warnings.append(ISTANBUL_MINING_WARNING)
        supports = _supports_from_record(None, reason=ISTANBUL_MINING_WARNING)
    else:
        if is_istanbul_target_investment(province, is_target):
            warnings.append(ISTANBUL_TARGET_WARNING)
            supports = supports.model_copy(update={
                "target_tax_discount": NotApplicable(reason=ISTANBUL_TARGET_WARNING),
            })
        if is_res_ges_investment(sector):
            warnings.append(RES_GES_WARNING)
            na = NotApplicable(reason=RES_GES_NA_REASON)
            supports = supports.model_copy(update={
                "target_interest_support": na,
                "target_cap": na,
                "priority_interest_support": na,
                "priority_cap": na,
            })

    return IncentiveResult(
        sector=SectorInfo(
            nace_code=sector.nace_code,
            name=sector.name,
            is_target=is_target,
            is_priority=is_priority,
            is_high_tech=sector.is_high_tech,
            is_mid_high_tech=sector.is_mid_high_tech,
            conditions=sector.conditions,
            min_investment=sector.min_investment(region),
        ),
        location=LocationInfo(
            province=province,
            district=district,
            osb_status=osb_status,
            region=region,
            original_region=base_region if program.is_eligible else None,
            subregion=subregion,
            sgk_duration=sgk_text,
            special_program=program,
        ),
        supports=supports,
        warnings=warnings,
        categorically_unsupported=unsupported,
    )
