"""Loan payment plan — equal-installment (annuity) amortization.

Key formulas:
  r           = annual_interest_rate / 12
  installment = P × r × (1+r)^n / ((1+r)^n − 1)      (P / n when r = 0)
  interest_m  = balance_(m−1) × r
  principal_m = installment − interest_m
  BSMV_m      = interest_m × bsmv_rate
  KKDF_m      = interest_m × kkdf_rate

BSMV and KKDF are levies on the interest; they are reported per row but are
not part of the principal/interest split.  The balance is carried at full
precision and only the reported fields are rounded to kuruş (2 dp).  The
principal column is the drop in the reported balance, so it sums to the
loan amount, and the last row takes whatever balance is left so the final
remaining principal is exactly zero.
"""

from __future__ import annotations

import logging

from tesvik_engine.models.results import PaymentPlan, PaymentPlanDetail

logger = logging.getLogger(__name__)


def annuity_installment(principal: float, monthly_rate: float, term_months: int) -> float:
    """Unrounded fixed monthly installment."""
    if monthly_rate > 0:
        factor = (1 + monthly_rate) ** term_months
        return principal * monthly_rate * factor / (factor - 1)
    return principal / term_months


def build_payment_plan(
    principal: float,
    annual_interest_rate: float,
    term_months: int,
    bsmv_rate: float,
    kkdf_rate: float,
) -> list[PaymentPlanDetail]:
    """Generate the month-by-month payment plan.

    Parameters
    ----------
    principal : float
        Loan amount (TRY).  A zero principal yields an empty plan.
    annual_interest_rate : float
        Annual nominal rate as a fraction (0.45 = 45%).
    term_months : int
        Number of installments; the plan has exactly this many rows.
    bsmv_rate, kkdf_rate : float
        Levy rates applied to each period's interest (fractions).

    Returns
    -------
    list[PaymentPlanDetail]
        One row per installment.

    Raises
    ------
    ValueError
        If ``term_months < 1`` or any amount/rate is negative.
    """
    if term_months < 1:
        raise ValueError(f"term_months must be at least 1, got {term_months}")
    if principal < 0 or annual_interest_rate < 0 or bsmv_rate < 0 or kkdf_rate < 0:
        raise ValueError("principal and rates must be non-negative")
    if principal == 0:
        return []

    monthly_rate = annual_interest_rate / 12
    installment = annuity_installment(principal, monthly_rate, term_months)
    reported_installment = round(installment, 2)

    rows: list[PaymentPlanDetail] = []
    balance = float(principal)
    reported_balance = round(principal, 2)

    for m in range(1, term_months + 1):
        interest = balance * monthly_rate
        interest_2dp = round(interest, 2)
        if m < term_months:
            balance -= installment - interest
            closing = round(balance, 2)
        else:
            # Final row: fold the rounding residual into the principal
            balance = 0.0
            closing = 0.0

        principal_part = round(reported_balance - closing, 2)
        if m < term_months:
            amount = reported_installment
        else:
            amount = round(principal_part + interest_2dp, 2)

        rows.append(PaymentPlanDetail(
            taksit_no=m,
            taksit_tutari=amount,
            anapara_odemesi=principal_part,
            faiz_tutari=interest_2dp,
            bsmv=round(interest_2dp * bsmv_rate, 2),
            kkdf=round(interest_2dp * kkdf_rate, 2),
            kalan_anapara=closing,
        ))
        reported_balance = closing

    residual = rows[-1].taksit_tutari - reported_installment
    if abs(residual) >= 0.01:
        logger.debug(
            "Final installment adjusted by %.2f to close the plan (term=%d)",
            residual, term_months,
        )
    return rows


def summarize_payment_plan(
    principal: float,
    annual_interest_rate: float,
    rows: list[PaymentPlanDetail],
) -> PaymentPlan:
    """Attach the totals shown under the plan table."""
    total_installments = sum(r.taksit_tutari for r in rows)
    total_interest = sum(r.faiz_tutari for r in rows)
    total_bsmv = sum(r.bsmv for r in rows)
    total_kkdf = sum(r.kkdf for r in rows)
    return PaymentPlan(
        principal=round(principal, 2),
        annual_interest_rate=annual_interest_rate,
        term_months=len(rows),
        rows=rows,
        total_interest=round(total_interest, 2),
        total_bsmv=round(total_bsmv, 2),
        total_kkdf=round(total_kkdf, 2),
        total_payment=round(total_installments + total_bsmv + total_kkdf, 2),
    )
