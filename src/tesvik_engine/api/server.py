"""FastAPI server — HTTP API for the incentive calculator and sector query.

Run with:
    uvicorn tesvik_engine.api.server:app --reload --port 8000

Or:
    python -m tesvik_engine.api.server

Endpoints:
    GET  /health            — liveness probe
    GET  /                  — welcome + endpoint list
    GET  /schema            — JSON Schema for the calculator inputs
    GET  /provinces         — provinces with their development region
    GET  /sectors?q=        — sector search by NACE code prefix or name
    POST /calculate         — validate + calculate (errors come back in the body)
    POST /payment-plan      — stand-alone loan payment plan
    POST /incentives/query  — sector / location incentive lookup
    POST /report            — plain-text report for a calculation or a query
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from tesvik_engine.api.narrative import render_calculator_report, render_query_report
from tesvik_engine.config.calculator import IncentiveCalculatorInputs
from tesvik_engine.config.enums import OsbStatus
from tesvik_engine.config.settings import configure_logging, settings
from tesvik_engine.data.source import default_data_source
from tesvik_engine.engine.classification import query_incentives
from tesvik_engine.engine.orchestrator import run_calculator
from tesvik_engine.engine.validator import validate_inputs
from tesvik_engine.finance.payment_plan import build_payment_plan, summarize_payment_plan
from tesvik_engine.models.incentive import IncentiveResult, SectorRecord
from tesvik_engine.models.results import IncentiveCalculatorResults, PaymentPlan

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# App setup
# ═══════════════════════════════════════════════════════════════════════════

app = FastAPI(
    title="Teşvik Hesaplama API",
    version="1.0",
    description=(
        "Investment incentive calculator: eligibility validation, support "
        "amounts (SGK premium, tax reduction, machinery, interest/profit "
        "share, VAT/customs exemption), loan payment plans and the "
        "sector / location incentive query."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ═══════════════════════════════════════════════════════════════════════════
# Request / response models
# ═══════════════════════════════════════════════════════════════════════════

class CalculateRequest(BaseModel):
    """Request body for /calculate.  Raw form values, validated by the engine."""
    inputs: dict[str, Any] = Field(
        default_factory=dict,
        description="Calculator form fields (snake_case). Missing fields use defaults. "
                    "Example: {'incentive_type': 'Technology Initiative', 'province': 'Ankara', "
                    "'number_of_employees': 10, 'construction_cost': 5000000, "
                    "'domestic_machinery_cost': 3000000, 'support_preference': 'Machinery Support'}",
    )
    include_report: bool = Field(default=False, description="Attach the plain-text report.")


class CalculateResponse(BaseModel):
    """Response from /calculate."""
    result: IncentiveCalculatorResults
    report: str = ""


class PaymentPlanRequest(BaseModel):
    """Request body for /payment-plan."""
    principal: float = Field(ge=0, allow_inf_nan=False, description="Loan amount (TRY).")
    annual_interest_rate: float = Field(
        ge=0, le=500, description="Annual nominal rate in percent (45 = 45%).",
    )
    term_months: int = Field(ge=1, le=360, description="Number of monthly installments.")
    bsmv_rate: float | None = Field(
        default=None, ge=0, le=1, description="BSMV rate as a fraction. Defaults to settings.",
    )
    kkdf_rate: float | None = Field(
        default=None, ge=0, le=1, description="KKDF rate as a fraction. Defaults to settings.",
    )


class QueryRequest(BaseModel):
    """Request body for /incentives/query."""
    nace_code: str = Field(description="NACE code from the sector catalogue, e.g. '26.11'.")
    province: str
    district: str = ""
    osb_status: OsbStatus = OsbStatus.OUTSIDE


class ReportRequest(BaseModel):
    """Request body for /report.  Exactly one of ``inputs`` / ``query``."""
    inputs: dict[str, Any] | None = Field(
        default=None, description="Calculator form fields, as for /calculate.",
    )
    query: QueryRequest | None = None


class ProvinceInfo(BaseModel):
    province: str
    region: int


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

def _calculator_report(raw: dict[str, Any], result: IncentiveCalculatorResults) -> str:
    """Render the calculator report, with the input summary when inputs parsed."""
    outcome = validate_inputs(raw)
    return render_calculator_report(result, outcome.inputs)


def _run_query(req: QueryRequest) -> IncentiveResult:
    source = default_data_source()
    sector = source.sector(req.nace_code)
    if sector is None:
        raise HTTPException(status_code=404, detail=f"Unknown NACE code: {req.nace_code}")
    return query_incentives(sector, req.province, req.district, req.osb_status, source=source)


# ═══════════════════════════════════════════════════════════════════════════
# Endpoints
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check():
    """Health check for deployment platforms."""
    return {"status": "ok"}


@app.get("/")
def root():
    """API root — returns a welcome message and the endpoint list."""
    return {
        "name": "Teşvik Hesaplama API",
        "version": "1.0",
        "docs": "GET /docs (interactive Swagger UI)",
        "endpoints": [
            "GET /schema",
            "GET /provinces",
            "GET /sectors?q=",
            "POST /calculate",
            "POST /payment-plan",
            "POST /incentives/query",
            "POST /report",
        ],
    }


@app.get("/schema")
def get_schema():
    """JSON Schema for the calculator inputs — types, defaults, constraints."""
    return IncentiveCalculatorInputs.model_json_schema()


@app.get("/provinces", response_model=list[ProvinceInfo])
def list_provinces():
    """All provinces with their development region."""
    source = default_data_source()
    return [
        ProvinceInfo(province=p, region=source.province_region(p))
        for p in source.provinces()
    ]


@app.get("/sectors", response_model=list[SectorRecord])
def search_sectors(
    q: str = Query(default="", description="NACE code prefix or part of the sector name"),
    limit: int = Query(default=20, ge=1, le=200),
):
    """Search the sector catalogue."""
    return default_data_source().search_sectors(q, limit=limit)


@app.post("/calculate", response_model=CalculateResponse)
def calculate(req: CalculateRequest):
    """Validate the form and calculate every support amount.

    Ineligible input is not an HTTP error: the response carries
    ``is_eligible=false`` and the accumulated ``validation_errors``.

    Example minimal request:
    ```json
    {"inputs": {"province": "Ankara", "number_of_employees": 10,
                "construction_cost": 5000000, "domestic_machinery_cost": 3000000,
                "support_preference": "Machinery Support"}}
    ```
    """
    result = run_calculator(req.inputs)
    report = _calculator_report(req.inputs, result) if req.include_report else ""
    return CalculateResponse(result=result, report=report)


@app.post("/payment-plan", response_model=PaymentPlan)
def payment_plan(req: PaymentPlanRequest):
    """Equal-installment payment plan with BSMV / KKDF per row."""
    bsmv = settings.bsmv_rate if req.bsmv_rate is None else req.bsmv_rate
    kkdf = settings.kkdf_rate if req.kkdf_rate is None else req.kkdf_rate
    rate = req.annual_interest_rate / 100
    try:
        rows = build_payment_plan(req.principal, rate, req.term_months, bsmv, kkdf)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return summarize_payment_plan(req.principal, rate, rows)


@app.post("/incentives/query", response_model=IncentiveResult)
def incentives_query(req: QueryRequest):
    """Region, special programme and support rates for one sector at one location."""
    return _run_query(req)


@app.post("/report")
def render_report(req: ReportRequest):
    """Plain-text report for either a calculator form or a sector query."""
    if (req.inputs is None) == (req.query is None):
        raise HTTPException(status_code=422, detail="Provide exactly one of 'inputs' or 'query'.")
    if req.inputs is not None:
        result = run_calculator(req.inputs)
        return {"kind": "calculator", "report": _calculator_report(req.inputs, result)}
    result = _run_query(req.query)
    return {"kind": "query", "report": render_query_report(result)}


# ═══════════════════════════════════════════════════════════════════════════
# CLI entry point
# ═══════════════════════════════════════════════════════════════════════════

def main():
    """Run the API server."""
    import uvicorn
    configure_logging()
    logger.info("Starting API on %s:%d", settings.api_host, settings.api_port)
    uvicorn.run(
        "tesvik_engine.api.server:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
