"""Teşvik Hesaplama — Streamlit dashboard.

Layout: sidebar calculator form → main area with two tabs
(Hesaplama | Sektör Sorgusu).  Headlines as metric cards, the support
breakdown as a table + bar chart, the loan payment plan as a table +
stacked principal/interest chart.

Run with:
    streamlit run src/tesvik_engine/dashboard/app.py
"""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from tesvik_engine.api.narrative import SUPPORT_LABELS, render_calculator_report, render_query_report
from tesvik_engine.config import (
    IncentiveCalculatorInputs,
    IncentiveType,
    OsbStatus,
    SupportPreference,
    TaxReductionSupport,
)
from tesvik_engine.data.source import default_data_source
from tesvik_engine.engine.classification import query_incentives
from tesvik_engine.engine.orchestrator import run_calculator
from tesvik_engine.formatting import format_pct, format_try
from tesvik_engine.models.incentive import Amount
from tesvik_engine.models.results import PaymentPlan

# ---------------------------------------------------------------------------
# Defaults: single source of truth for sidebar defaults
# ---------------------------------------------------------------------------
_DEF = IncentiveCalculatorInputs()
_SOURCE = default_data_source()
_PROVINCES = _SOURCE.provinces()

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Teşvik Hesaplama", page_icon="🏭", layout="wide")

st.markdown("""
<style>
div[data-testid="stMetric"] {
    background: linear-gradient(135deg, rgba(30,34,44,0.95), rgba(22,26,35,0.98));
    border: 1px solid rgba(255,255,255,0.06);
    border-radius: 10px;
    padding: 14px 16px 12px;
}
</style>
""", unsafe_allow_html=True)

st.title("Yatırım Teşvik Hesaplama")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fmt_try(val: float) -> str:
    """Format TRY with milyon / milyar for large values."""
    if abs(val) >= 1e9:
        return f"{val / 1e9:,.2f} milyar TL"
    if abs(val) >= 1e6:
        return f"{val / 1e6:,.2f} milyon TL"
    return format_try(val)


def _plan_frame(plan: PaymentPlan) -> pd.DataFrame:
    df = pd.DataFrame([row.model_dump() for row in plan.rows])
    return df.rename(columns={
        "taksit_no": "Taksit",
        "taksit_tutari": "Taksit tutarı",
        "anapara_odemesi": "Anapara",
        "faiz_tutari": "Faiz",
        "bsmv": "BSMV",
        "kkdf": "KKDF",
        "kalan_anapara": "Kalan anapara",
    })


def _plan_chart(df: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Bar(x=df["Taksit"], y=df["Anapara"], name="Anapara", marker_color="#0984e3"))
    fig.add_trace(go.Bar(x=df["Taksit"], y=df["Faiz"], name="Faiz", marker_color="#e17055"))
    fig.add_trace(go.Scatter(
        x=df["Taksit"], y=df["Kalan anapara"], name="Kalan anapara",
        yaxis="y2", line=dict(color="#00b894", width=2),
    ))
    fig.update_layout(
        barmode="stack",
        xaxis_title="Taksit",
        yaxis_title="TL",
        yaxis2=dict(title="Kalan anapara (TL)", overlaying="y", side="right", showgrid=False),
        height=340,
        margin=dict(l=20, r=20, t=30, b=20),
        legend=dict(orientation="h", y=1.12),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
    )
    return fig


# ---------------------------------------------------------------------------
# SIDEBAR: calculator inputs
# ---------------------------------------------------------------------------
st.sidebar.header("Yatırım Bilgileri")

with st.sidebar.expander("Teşvik ve Lokasyon", expanded=True):
    _TYPES = list(IncentiveType)
    incentive_type = st.selectbox(
        "Teşvik türü", _TYPES, index=_TYPES.index(_DEF.incentive_type),
        format_func=lambda t: t.value,
    )
    province = st.selectbox("İl", _PROVINCES, index=_PROVINCES.index("Ankara"))
    district = st.text_input("İlçe", "")
    osb_status = st.radio("OSB durumu", list(OsbStatus), format_func=lambda s: s.value, horizontal=True)
    nace_code = st.text_input("NACE kodu (isteğe bağlı)", "")

with st.sidebar.expander("Sabit Yatırım (TL)", expanded=True):
    employees = st.number_input("Çalışan sayısı", 0, 100_000, 10)
    land = st.number_input("Arazi", 0.0, value=0.0, step=100_000.0)
    construction = st.number_input("Bina-inşaat", 0.0, value=5_000_000.0, step=100_000.0)
    imported = st.number_input("İthal makine", 0.0, value=2_000_000.0, step=100_000.0)
    domestic = st.number_input("Yerli makine", 0.0, value=3_000_000.0, step=100_000.0)
    other = st.number_input("Diğer giderler", 0.0, value=0.0, step=100_000.0)

with st.sidebar.expander("Destek Tercihi", expanded=True):
    _PREFS = list(SupportPreference)
    preference = st.selectbox(
        "Destek tercihi", _PREFS, index=_PREFS.index(_DEF.support_preference),
        format_func=lambda p: p.value,
    )
    tax_reduction = st.radio(
        "Vergi indirimi talebi", list(TaxReductionSupport),
        format_func=lambda t: "Evet" if t is TaxReductionSupport.YES else "Hayır", horizontal=True,
    )
    is_interest = preference is SupportPreference.INTEREST_PROFIT_SHARE
    c1, c2 = st.columns(2)
    bank_rate = c1.number_input("Faiz oranı %", 0.0, 500.0, float(_DEF.bank_interest_rate), 0.5,
                                disabled=not is_interest)
    term = c2.number_input("Vade (ay)", 1, 360, _DEF.loan_term_months, disabled=not is_interest)
    loan = st.number_input("Kredi tutarı", 0.0, value=5_000_000.0, step=100_000.0,
                           disabled=not is_interest)

raw_inputs = {
    "incentive_type": incentive_type.value,
    "province": province,
    "district": district or None,
    "osb_status": osb_status.value,
    "nace_code": nace_code or None,
    "number_of_employees": employees,
    "land_cost": land,
    "construction_cost": construction,
    "imported_machinery_cost": imported,
    "domestic_machinery_cost": domestic,
    "other_expenses": other,
    "support_preference": preference.value,
    "tax_reduction_support": tax_reduction.value,
    "bank_interest_rate": bank_rate,
    "loan_amount": loan if is_interest else 0.0,
    "loan_term_months": term,
}

calculator_tab, query_tab = st.tabs(["Hesaplama", "Sektör Sorgusu"])

# ═══════════════════════════════════════════════════════════════════════════
# Calculator tab
# ═══════════════════════════════════════════════════════════════════════════
with calculator_tab:
    result = run_calculator(raw_inputs)

    if not result.is_eligible:
        st.error("Yatırım teşvik için uygun değildir.")
        for error in result.validation_errors:
            st.markdown(f"- {error}")
    else:
        for warning in result.warning_messages:
            st.warning(warning)

        cols = st.columns(4)
        cols[0].metric("Toplam sabit yatırım", _fmt_try(result.total_fixed_investment))
        cols[1].metric("Toplam destek", _fmt_try(result.total_support))
        share = result.total_support / result.total_fixed_investment if result.total_fixed_investment else 0.0
        cols[2].metric("Destek / yatırım", format_pct(round(share, 3)))
        cols[3].metric("Bölge", f"{result.region}. Bölge" if result.region else "-")

        # ── Support breakdown ──
        st.subheader("Destek Kalemleri")
        breakdown = pd.DataFrame(
            [(SUPPORT_LABELS[k], v) for k, v in result.support_parts().items()],
            columns=["Destek", "Tutar"],
        )
        c1, c2 = st.columns([0.45, 0.55])
        c1.dataframe(
            breakdown.assign(Tutar=breakdown["Tutar"].map(lambda v: format_try(v, 2))),
            use_container_width=True, hide_index=True,
        )
        nonzero = breakdown[breakdown["Tutar"] > 0]
        if not nonzero.empty:
            fig = go.Figure(go.Bar(
                x=nonzero["Tutar"], y=nonzero["Destek"], orientation="h", marker_color="#6c5ce7",
            ))
            fig.update_layout(
                height=300, margin=dict(l=20, r=20, t=10, b=20),
                plot_bgcolor='rgba(0,0,0,0)', paper_bgcolor='rgba(0,0,0,0)',
            )
            c2.plotly_chart(fig, use_container_width=True)

        # ── Payment plan ──
        plan = result.payment_plan
        if plan is not None and plan.rows:
            st.subheader("Kredi Ödeme Planı")
            cols = st.columns(4)
            cols[0].metric("Aylık taksit", format_try(plan.rows[0].taksit_tutari, 2))
            cols[1].metric("Toplam faiz", _fmt_try(plan.total_interest))
            cols[2].metric("Toplam BSMV + KKDF", _fmt_try(plan.total_bsmv + plan.total_kkdf))
            cols[3].metric("Toplam geri ödeme", _fmt_try(plan.total_payment))
            df = _plan_frame(plan)
            st.plotly_chart(_plan_chart(df), use_container_width=True)
            with st.expander("Taksit tablosu"):
                st.dataframe(df, use_container_width=True, hide_index=True)

    with st.expander("Rapor (metin)"):
        st.code(render_calculator_report(result), language=None)

# ═══════════════════════════════════════════════════════════════════════════
# Sector query tab
# ═══════════════════════════════════════════════════════════════════════════
with query_tab:
    search = st.text_input("Sektör ara (NACE kodu veya ad)", "")
    hits = _SOURCE.search_sectors(search, limit=50)
    if not hits:
        st.info("Eşleşen sektör bulunamadı.")
    else:
        sector = st.selectbox("Sektör", hits, format_func=lambda s: f"{s.nace_code} · {s.name}")
        query = query_incentives(sector, province, district, osb_status, source=_SOURCE)

        for warning in query.warnings:
            st.warning(warning)

        loc = query.location
        cols = st.columns(3)
        cols[0].metric("Bölge", f"{loc.region}. Bölge",
                       delta=f"asıl: {loc.original_region}. Bölge" if loc.original_region else None,
                       delta_color="off")
        cols[1].metric("SGK desteği", loc.sgk_duration)
        cols[2].metric("Asgari yatırım", _fmt_try(query.sector.min_investment))

        s = query.supports
        rows = []
        for label, prefix in (("Hedef", "target"), ("Öncelikli", "priority")):
            tax = getattr(s, f"{prefix}_tax_discount")
            interest = getattr(s, f"{prefix}_interest_support")
            cap = getattr(s, f"{prefix}_cap")
            rows.append({
                "Yatırım": label,
                "Vergi indirimi": format_pct(tax.value) if isinstance(tax, Amount) else tax.reason,
                "Faiz desteği": format_pct(interest.value) if isinstance(interest, Amount) else interest.reason,
                "Üst limit": _fmt_try(cap.value) if isinstance(cap, Amount) else cap.reason,
            })
        st.dataframe(rows, use_container_width=True, hide_index=True)

        with st.expander("Rapor (metin)"):
            st.code(render_query_report(query), language=None)
