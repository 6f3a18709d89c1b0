"""Report generator — plain-text Turkish reports for calculator and query results.

Converts ``IncentiveCalculatorResults`` and ``IncentiveResult`` into
sectioned text that mirrors the printed incentive report: sector,
location, general supports, target / priority investment supports and
conditions.
"""

from __future__ import annotations

from tesvik_engine.config.calculator import IncentiveCalculatorInputs
from tesvik_engine.formatting import format_pct, format_try
from tesvik_engine.models.incentive import Amount, IncentiveResult, NotApplicable
from tesvik_engine.models.results import IncentiveCalculatorResults

WIDTH = 60

SUPPORT_LABELS = {
    "vat_exemption_amount": "KDV istisnası",
    "customs_exemption_amount": "Gümrük vergisi muafiyeti",
    "sgk_employer_premium_support": "SGK işveren hissesi desteği",
    "sgk_employee_premium_support": "SGK işçi hissesi desteği",
    "tax_reduction_investment_contribution": "Vergi indirimi yatırıma katkı",
    "machinery_support_amount": "Makine desteği",
    "interest_profit_share_support_amount": "Faiz/kâr payı desteği",
}


def _header(sections: list[str], title: str) -> None:
    if sections:
        sections.append("")
    sections.append("=" * WIDTH)
    sections.append(title)
    sections.append("=" * WIDTH)


def _yes_no(flag: bool) -> str:
    return "Evet" if flag else "Hayır"


def _rate(value: Amount | NotApplicable) -> str:
    if isinstance(value, NotApplicable):
        return value.reason or "Uygulanmaz"
    return format_pct(value.value)


def _money(value: Amount | NotApplicable) -> str:
    if isinstance(value, NotApplicable):
        return value.reason or "Uygulanmaz"
    return format_try(value.value)


def render_calculator_report(
    results: IncentiveCalculatorResults,
    inputs: IncentiveCalculatorInputs | None = None,
) -> str:
    """Generate the calculator report.

    Returns a text block covering:
      1. Investment summary (when ``inputs`` is given)
      2. Eligibility
      3. Support breakdown
      4. Payment plan totals (interest support only)
      5. Warnings
    """
    sections: list[str] = []

    # ── 1. Investment summary ──
    if inputs is not None:
        _header(sections, "YATIRIM BİLGİLERİ")
        location = inputs.province or "-"
        if inputs.district:
            location += f" / {inputs.district}"
        sections.append(
            f"Teşvik türü: {inputs.incentive_type.value}\n"
            f"Lokasyon: {location}\n"
            f"Çalışan sayısı: {inputs.number_of_employees}\n"
            f"Destek tercihi: {inputs.support_preference.value}\n"
            f"Vergi indirimi: {inputs.tax_reduction_support.value}"
        )
        if inputs.nace_code:
            sections.append(f"NACE kodu: {inputs.nace_code}")
        if inputs.osb_status is not None:
            sections.append(f"OSB durumu: {inputs.osb_status.value}")

    # ── 2. Eligibility ──
    _header(sections, "UYGUNLUK")
    if not results.is_eligible:
        sections.append("Yatırım teşvik için uygun değildir:")
        for error in results.validation_errors:
            sections.append(f"  - {error}")
        return "\n".join(sections)

    sections.append(
        f"Yatırım teşvik için uygundur.\n"
        f"Toplam sabit yatırım: {format_try(results.total_fixed_investment)}"
    )
    if results.region is not None:
        sections.append(f"Bölge: {results.region}. Bölge")

    # ── 3. Support breakdown ──
    _header(sections, "DESTEK KALEMLERİ")
    if results.support_suppressed:
        sections.append("Bu yatırım için destek hesaplaması yapılmamıştır.")
    else:
        sections.append(f"KDV/Gümrük muafiyeti: {results.vat_customs_exemption}")
        for key, amount in results.support_parts().items():
            sections.append(f"  {SUPPORT_LABELS[key]:36s}  {format_try(amount, 2):>22s}")
        sections.append(f"  {'TOPLAM DESTEK':36s}  {format_try(results.total_support, 2):>22s}")

        if results.total_fixed_investment > 0:
            share = results.total_support / results.total_fixed_investment
            sections.append(f"\nToplam desteğin sabit yatırıma oranı: {format_pct(round(share, 3))}")

    # ── 4. Payment plan ──
    plan = results.payment_plan
    if plan is not None and plan.rows:
        _header(sections, "KREDİ ÖDEME PLANI")
        sections.append(
            f"Kredi tutarı: {format_try(plan.principal, 2)}\n"
            f"Yıllık faiz oranı: {format_pct(plan.annual_interest_rate)}\n"
            f"Vade: {plan.term_months} ay\n"
            f"Aylık taksit: {format_try(plan.rows[0].taksit_tutari, 2)}\n"
            f"Toplam faiz: {format_try(plan.total_interest, 2)}\n"
            f"Toplam BSMV: {format_try(plan.total_bsmv, 2)}\n"
            f"Toplam KKDF: {format_try(plan.total_kkdf, 2)}\n"
            f"Toplam geri ödeme: {format_try(plan.total_payment, 2)}"
        )

    # ── 5. Warnings ──
    if results.warning_messages:
        _header(sections, "UYARILAR")
        for i, warning in enumerate(results.warning_messages, 1):
            sections.append(f"  {i}. {warning}")

    return "\n".join(sections)


def render_query_report(result: IncentiveResult) -> str:
    """Generate the sector / location incentive report."""
    sector = result.sector
    location = result.location
    supports = result.supports
    sections: list[str] = []

    # ── 1. Sector ──
    _header(sections, "SEKTÖR BİLGİLERİ")
    sections.append(
        f"NACE kodu: {sector.nace_code}\n"
        f"Sektör: {sector.name}\n"
        f"Hedef yatırım: {_yes_no(sector.is_target)}\n"
        f"Öncelikli yatırım: {_yes_no(sector.is_priority)}\n"
        f"Yüksek teknoloji: {_yes_no(sector.is_high_tech)}\n"
        f"Orta-yüksek teknoloji: {_yes_no(sector.is_mid_high_tech)}\n"
        f"Asgari yatırım tutarı: {format_try(sector.min_investment)}"
    )

    # ── 2. Location ──
    _header(sections, "LOKASYON BİLGİLERİ")
    region_line = f"Bölge: {location.region}. Bölge"
    if location.original_region is not None:
        region_line += f" (asıl bölge: {location.original_region}. Bölge)"
    sections.append(
        f"İl / İlçe: {location.province} / {location.district}\n"
        f"OSB durumu: {location.osb_status.value}\n"
        f"{region_line}"
    )
    if location.subregion:
        sections.append(f"Alt bölge: {location.subregion}")
    sections.append(f"SGK prim desteği süresi: {location.sgk_duration}")
    program = location.special_program
    if program is not None and program.is_eligible:
        sections.append(f"Özel program: {program.description}")

    if result.categorically_unsupported:
        _header(sections, "DESTEKLER")
        sections.append("Bu sektör / lokasyon için teşvik desteği bulunmamaktadır.")
    else:
        # ── 3. General supports ──
        _header(sections, "GENEL DESTEKLER")
        sections.append(
            f"KDV istisnası: {_yes_no(supports.vat_exemption)}\n"
            f"Gümrük vergisi muafiyeti: {_yes_no(supports.customs_exemption)}"
        )

        # ── 4. Target investment ──
        if sector.is_target:
            _header(sections, "HEDEF YATIRIM DESTEKLERİ")
            sections.append(
                f"Vergi indirimi: {_rate(supports.target_tax_discount)}\n"
                f"Faiz/kâr payı desteği: {_rate(supports.target_interest_support)}\n"
                f"Üst limit: {_money(supports.target_cap)}\n"
                f"Sabit yatırıma oranla üst limit: {_rate(supports.target_cap_ratio)}"
            )

        # ── 5. Priority investment ──
        if sector.is_priority:
            _header(sections, "ÖNCELİKLİ YATIRIM DESTEKLERİ")
            sections.append(
                f"Vergi indirimi: {_rate(supports.priority_tax_discount)}\n"
                f"Faiz/kâr payı desteği: {_rate(supports.priority_interest_support)}\n"
                f"Üst limit: {_money(supports.priority_cap)}\n"
                f"Sabit yatırıma oranla üst limit: {_rate(supports.priority_cap_ratio)}"
            )

    # ── 6. Conditions ──
    if sector.conditions:
        _header(sections, "ŞARTLAR")
        sections.append(sector.conditions)

    if result.warnings:
        _header(sections, "UYARILAR")
        for i, warning in enumerate(result.warnings, 1):
            sections.append(f"  {i}. {warning}")

    return "\n".join(sections)
