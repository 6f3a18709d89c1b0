"""Incentive calculator inputs — one submitted calculator form."""

from pydantic import BaseModel, ConfigDict, Field

from tesvik_engine.config.enums import (
    IncentiveType,
    OsbStatus,
    SupportPreference,
    TaxReductionSupport,
)


class IncentiveCalculatorInputs(BaseModel):
    """Validated calculator inputs.

    Built from the user-submitted form by the eligibility validator and
    immutable from then on.  All monetary amounts are in TRY.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    incentive_type: IncentiveType = Field(
        default=IncentiveType.TECHNOLOGY,
        description="Incentive programme the investment applies under.",
    )
    province: str = Field(default="", description="Province (il) of the investment.")
    district: str | None = Field(default=None, description="District (ilçe), if known.")
    osb_status: OsbStatus | None = Field(
        default=None,
        description="Whether the investment sits inside an OSB / industrial zone.",
    )
    nace_code: str | None = Field(
        default=None,
        description="NACE activity code of the investment. Enables sector-level "
                    "exclusion checks (e.g. mining in İstanbul).",
    )

    # --- Employment ---
    number_of_employees: int = Field(default=0, ge=0, description="Planned headcount.")

    # --- Fixed investment items ---
    land_cost: float = Field(default=0, ge=0, description="Land (arsa) cost.")
    construction_cost: float = Field(default=0, ge=0, description="Building / construction cost.")
    imported_machinery_cost: float = Field(default=0, ge=0, description="Imported machinery and equipment.")
    domestic_machinery_cost: float = Field(default=0, ge=0, description="Domestic machinery and equipment.")
    other_expenses: float = Field(default=0, ge=0, description="Other fixed investment expenses.")

    # --- Support choices ---
    support_preference: SupportPreference = Field(
        default=SupportPreference.INTEREST_PROFIT_SHARE,
        description="Interest/profit-share support or machinery support (mutually exclusive).",
    )
    tax_reduction_support: TaxReductionSupport = Field(
        default=TaxReductionSupport.YES,
        description="Whether the tax-reduction investment contribution is claimed. "
                    "Declining it raises the caps on the selected financial support.",
    )

    # --- Investment loan (interest/profit-share support only) ---
    bank_interest_rate: float = Field(
        default=45, ge=0, le=500,
        description="Annual bank interest rate in percent (45 = 45%).",
    )
    loan_amount: float = Field(default=0, ge=0, description="Investment loan principal.")
    loan_term_months: int = Field(default=60, ge=0, le=360, description="Loan term in months.")

    @property
    def total_machinery_cost(self) -> float:
        return self.imported_machinery_cost + self.domestic_machinery_cost

    @property
    def total_fixed_investment(self) -> float:
        """Land + construction + machinery (imported + domestic) + other."""
        return (
            self.land_cost
            + self.construction_cost
            + self.imported_machinery_cost
            + self.domestic_machinery_cost
            + self.other_expenses
        )
