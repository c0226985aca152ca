"""Compliance engine over a records snapshot supplied in the request body."""
from fastapi import APIRouter, Depends

from stayguard.config import Settings, get_settings
from stayguard.dependencies import get_jurisdiction_table, get_rules
from stayguard.routers.errors import engine_errors
from stayguard.schemas.compliance import (
    AlertResponse,
    AlertsRequest,
    ComplianceRequest,
    ComplianceResultResponse,
    FutureTripRequest,
    FutureTripResponse,
    OverstayReportResponse,
    OverstayRequest,
    TripOverstayPredictionResponse,
    TripOverstayRequest,
)
from stayguard.services.compliance import (
    build_alerts,
    check_overstay,
    compute_jurisdiction_compliance,
    predict_overstay_for_trip,
    simulate_future_trip,
)
from stayguard.services.intervals import DayInterval
from stayguard.services.jurisdictions import JurisdictionTable
from stayguard.services.overstay import summarize_overstays
from stayguard.services.rules import ComplianceRules

router = APIRouter(prefix="/compliance", tags=["compliance"])


def _strict(value: bool | None, settings: Settings) -> bool:
    return settings.strict_validation if value is None else value


@router.post("/jurisdiction", response_model=ComplianceResultResponse)
def jurisdiction_compliance(
    data: ComplianceRequest,
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
    settings: Settings = Depends(get_settings),
):
    with engine_errors():
        result = compute_jurisdiction_compliance(
            [r.to_record() for r in data.records],
            data.jurisdiction,
            data.reference_date,
            rules=rules,
            table=table,
            strict=_strict(data.strict, settings),
            horizon=data.horizon,
        )
    return result.to_dict()


@router.post("/future-trip", response_model=FutureTripResponse)
def future_trip(
    data: FutureTripRequest,
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
    settings: Settings = Depends(get_settings),
):
    with engine_errors():
        result = simulate_future_trip(
            [r.to_record() for r in data.records],
            data.jurisdiction,
            DayInterval(data.start_date, data.end_date),
            data.reference_date,
            rules=rules,
            table=table,
            strict=_strict(data.strict, settings),
            country=data.country,
        )
    return result.to_dict()


@router.post("/overstay", response_model=OverstayReportResponse)
def overstay(
    data: OverstayRequest,
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
    settings: Settings = Depends(get_settings),
):
    lookahead = rules.lookahead_days if data.lookahead_days is None else data.lookahead_days
    with engine_errors():
        warnings = check_overstay(
            [r.to_record() for r in data.records],
            data.reference_date,
            lookahead,
            strict=_strict(data.strict, settings),
            table=table,
        )
    return {"warnings": [w.to_dict() for w in warnings], "summary": summarize_overstays(warnings)}


@router.post("/overstay/predict", response_model=TripOverstayPredictionResponse)
def overstay_predict(
    data: TripOverstayRequest,
    table: JurisdictionTable = Depends(get_jurisdiction_table),
    settings: Settings = Depends(get_settings),
):
    """Would a planned stay in one country outlast the visa on file for it?"""
    with engine_errors():
        prediction = predict_overstay_for_trip(
            [r.to_record() for r in data.records],
            data.country,
            DayInterval(data.start_date, data.end_date),
            data.reference_date,
            strict=_strict(data.strict, settings),
            table=table,
        )
    return prediction.to_dict()


@router.post("/alerts", response_model=list[AlertResponse])
def alerts(
    data: AlertsRequest,
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
    settings: Settings = Depends(get_settings),
):
    """Ranked alerts for one snapshot: pooled-rule status plus per-record overstay risk."""
    with engine_errors():
        ranked, _ = build_alerts(
            [r.to_record() for r in data.records],
            data.jurisdiction,
            data.reference_date,
            rules=rules,
            table=table,
            strict=_strict(data.strict, settings),
            lookahead_days=data.lookahead_days,
            horizon=data.horizon,
        )
    return [a.to_dict() for a in ranked]
