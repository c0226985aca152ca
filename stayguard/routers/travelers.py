"""Compliance for stored travelers (records read from storage)."""
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stayguard.database import get_db
from stayguard.dependencies import get_jurisdiction_table, get_rules
from stayguard.routers.errors import engine_errors
from stayguard.schemas.compliance import AlertResponse, ComplianceResultResponse, OverstayReportResponse
from stayguard.services.compliance import check_overstay, compute_jurisdiction_compliance
from stayguard.services.jurisdictions import SCHENGEN, JurisdictionTable
from stayguard.services.overstay import summarize_overstays
from stayguard.services.records import get_stay_records
from stayguard.services.rules import ComplianceRules
from stayguard.services.stay_timer import check_traveler

router = APIRouter(prefix="/travelers", tags=["travelers"])


@router.get("/{traveler_id}/compliance", response_model=ComplianceResultResponse)
def traveler_compliance(
    traveler_id: str,
    jurisdiction: str = Query(SCHENGEN),
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
):
    records = get_stay_records(db, traveler_id)
    with engine_errors():
        result = compute_jurisdiction_compliance(
            records, jurisdiction, reference_date or date.today(), rules=rules, table=table, strict=False,
        )
    return result.to_dict()


@router.get("/{traveler_id}/overstay", response_model=OverstayReportResponse)
def traveler_overstay(
    traveler_id: str,
    reference_date: date | None = Query(None, description="Defaults to today"),
    lookahead_days: int | None = Query(None, ge=0),
    db: Session = Depends(get_db),
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
):
    records = get_stay_records(db, traveler_id)
    lookahead = rules.lookahead_days if lookahead_days is None else lookahead_days
    with engine_errors():
        warnings = check_overstay(records, reference_date or date.today(), lookahead, strict=False, table=table)
    return {"warnings": [w.to_dict() for w in warnings], "summary": summarize_overstays(warnings)}


@router.get("/{traveler_id}/alerts", response_model=list[AlertResponse])
def traveler_alerts(
    traveler_id: str,
    jurisdiction: str = Query(SCHENGEN),
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    rules: ComplianceRules = Depends(get_rules),
    table: JurisdictionTable = Depends(get_jurisdiction_table),
):
    with engine_errors():
        alerts = check_traveler(
            db, traveler_id, reference_date or date.today(), rules=rules, table=table, jurisdiction=jurisdiction,
        )
    return [a.to_dict() for a in alerts]
