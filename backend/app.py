from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from compliance import ComplianceEngine, LegalLimits
from config import CORS_ORIGINS, load_limits, setup_logging
from rotation import calculate_stats, eligible_pharmacists, generate_rotation
from schemas import (
    ComplianceReportRequest,
    ComplianceReportResponse,
    HealthResponse,
    LegalLimitsResponse,
    PharmacistStatsResponse,
    QuickCheckRequest,
    QuickCheckResponse,
    RotationRequest,
    RotationResultResponse,
    RotationStatsRequest,
    opening_hours_to_domain,
)

setup_logging()

app = FastAPI(title="pharmaCompliance")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def request_limits(
    max_daily_hours: float | None = Query(None, gt=0),
    weekly_rest_hours: float | None = Query(None, gt=0),
    max_weekly_hours: float | None = Query(None, gt=0),
    min_pharmacists: int | None = Query(None, ge=0),
) -> LegalLimits:
    try:
        return load_limits(
            max_daily_hours=max_daily_hours,
            weekly_rest_hours=weekly_rest_hours,
            max_weekly_hours=max_weekly_hours,
            min_pharmacists=min_pharmacists,
        )
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok"}


@app.get("/compliance/limits", response_model=LegalLimitsResponse)
async def get_limits():
    try:
        return load_limits().to_dict()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/compliance/report", response_model=ComplianceReportResponse)
async def compliance_report(
    request: ComplianceReportRequest,
    limits: LegalLimits = Depends(request_limits),
):
    if request.period_end < request.period_start:
        raise HTTPException(status_code=400, detail="period_end must not be before period_start")
    report = ComplianceEngine(limits).generate_report(
        shifts=[s.to_domain() for s in request.shifts],
        employees=[e.to_domain() for e in request.employees],
        period_start=request.period_start,
        period_end=request.period_end,
        opening_hours=opening_hours_to_domain(request.opening_hours),
    )
    return report.to_dict()


@app.post("/compliance/quick-check", response_model=QuickCheckResponse)
async def compliance_quick_check(
    request: QuickCheckRequest,
    limits: LegalLimits = Depends(request_limits),
):
    if (request.period_start is None) != (request.period_end is None):
        raise HTTPException(status_code=400, detail="period_start and period_end go together")
    if request.period_start and request.period_end < request.period_start:
        raise HTTPException(status_code=400, detail="period_end must not be before period_start")
    result = ComplianceEngine(limits).quick_check(
        shifts=[s.to_domain() for s in request.shifts],
        employees=[e.to_domain() for e in request.employees],
        opening_hours=opening_hours_to_domain(request.opening_hours),
        period_start=request.period_start,
        period_end=request.period_end,
    )
    return result.to_dict()


@app.post("/rotation/generate", response_model=RotationResultResponse)
async def rotation_generate(request: RotationRequest):
    if request.config.end_date < request.config.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    result = generate_rotation(
        config=request.config.to_domain(),
        employees=[e.to_domain() for e in request.employees],
        existing_assignments=[a.to_domain() for a in request.existing_assignments],
        shifts=[s.to_domain() for s in request.shifts],
        today=request.today,
    )
    return result.to_dict()


@app.post("/rotation/stats", response_model=list[PharmacistStatsResponse])
async def rotation_stats(request: RotationStatsRequest):
    pharmacists = eligible_pharmacists([e.to_domain() for e in request.employees])
    stats = calculate_stats(
        pharmacists,
        [a.to_domain() for a in request.assignments],
        today=request.today,
    )
    return [s.to_dict() for s in stats]
