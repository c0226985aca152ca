"""Manual trigger for the daily compliance check."""
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stayguard.database import get_db
from stayguard.services.stay_timer import run_compliance_check_job

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/run-compliance-check")
def trigger_compliance_check(
    reference_date: date | None = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
):
    """Run the compliance check job now. Alerts go to the configured dispatcher."""
    results = run_compliance_check_job(reference_date=reference_date, db=db)
    return {
        "status": "ok",
        "message": "Compliance check completed.",
        "travelers_with_alerts": len(results),
    }
