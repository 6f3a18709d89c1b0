"""Result types — the contract between the calculator and its renderers.

Screen display, the text report and the HTTP API all consume these models;
they carry no behaviour beyond small derived totals.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tesvik_engine.config.calculator import IncentiveCalculatorInputs


# ═══════════════════════════════════════════════════════════════════════════
# Payment plan
# ═══════════════════════════════════════════════════════════════════════════

class PaymentPlanDetail(BaseModel):
    """One installment row of an equal-installment loan schedule."""

    taksit_no: int
    """1-based installment index."""

    taksit_tutari: float
    """Installment = anapara_odemesi + faiz_tutari.  BSMV/KKDF are levied on top."""

    anapara_odemesi: float
    """Principal repaid this period."""

    faiz_tutari: float
    """Interest for the period = opening balance × monthly rate."""

    bsmv: float
    """Banking and insurance transactions tax on this period's interest."""

    kkdf: float
    """Resource utilization support fund levy on this period's interest."""

    kalan_anapara: float
    """Principal outstanding after this installment (exactly 0 on the last row)."""


class PaymentPlan(BaseModel):
    """Full schedule plus the totals shown under the plan table."""

    principal: float
    annual_interest_rate: float
    term_months: int
    rows: list[PaymentPlanDetail]
    total_interest: float
    total_bsmv: float
    total_kkdf: float
    total_payment: float
    """Σ installments + Σ BSMV + Σ KKDF."""


# ═══════════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════════

class ValidationOutcome(BaseModel):
    """Eligibility validator output.

    ``inputs`` is populated only when every field parsed; it can be present
    while ``is_eligible`` is False (e.g. investment below the threshold).
    """

    is_eligible: bool
    validation_errors: list[str] = Field(default_factory=list)
    inputs: IncentiveCalculatorInputs | None = None


# ═══════════════════════════════════════════════════════════════════════════
# Calculator results
# ═══════════════════════════════════════════════════════════════════════════

class IncentiveCalculatorResults(BaseModel):
    """Everything the calculator screen and report display.

    When ``is_eligible`` is False every monetary field is zero and
    ``validation_errors`` explains why.
    """

    is_eligible: bool
    validation_errors: list[str] = Field(default_factory=list)
    warning_messages: list[str] = Field(default_factory=list)

    total_fixed_investment: float = 0.0
    region: int | None = None
    """Development region (1–6) of the province, if known."""

    # --- Exemptions ---
    vat_customs_exemption: str = "YOK"
    """Descriptive exemption status: ``MEVCUT`` (available) or ``YOK``."""
    vat_exemption_eligible: bool = False
    customs_exemption_eligible: bool = False
    vat_exemption_amount: float = 0.0
    customs_exemption_amount: float = 0.0

    # --- SGK ---
    sgk_employer_premium_support: float = 0.0
    sgk_employee_premium_support: float = 0.0

    # --- Tax & financial supports ---
    tax_reduction_investment_contribution: float = 0.0
    machinery_support_amount: float = 0.0
    interest_profit_share_support_amount: float = 0.0

    total_support: float = 0.0
    """round(Σ individual support amounts, 2) — never re-derived from unrounded parts."""

    support_suppressed: bool = False
    """True when the sector/location combination is categorically excluded."""

    payment_plan: PaymentPlan | None = None

    def support_parts(self) -> dict[str, float]:
        """Individual support amounts that make up ``total_support``."""
        return {
            "vat_exemption_amount": self.vat_exemption_amount,
            "customs_exemption_amount": self.customs_exemption_amount,
            "sgk_employer_premium_support": self.sgk_employer_premium_support,
            "sgk_employee_premium_support": self.sgk_employee_premium_support,
            "tax_reduction_investment_contribution": self.tax_reduction_investment_contribution,
            "machinery_support_amount": self.machinery_support_amount,
            "interest_profit_share_support_amount": self.interest_profit_share_support_amount,
        }
