"""Daily compliance check: evaluate every stored traveler and hand ranked alerts to a dispatcher."""
import logging
from datetime import date
from typing import Callable

from sqlalchemy.orm import Session

from stayguard.config import get_settings
from stayguard.database import SessionLocal
from stayguard.services.alerts import Alert
from stayguard.services.compliance import build_alerts
from stayguard.services.errors import ComplianceError
from stayguard.services.jurisdictions import SCHENGEN, JurisdictionTable
from stayguard.services.records import get_stay_records, list_traveler_ids
from stayguard.services.rules import ComplianceRules

log = logging.getLogger("uvicorn.error")

Dispatcher = Callable[[str, list[Alert]], None]


def log_dispatch(traveler_id: str, alerts: list[Alert]) -> None:
    """Default dispatcher: alert transport (email/push) lives outside this service."""
    for a in alerts:
        log.info("[Compliance] traveler=%s severity=%s title=%s", traveler_id, a.severity.value, a.title)


def check_traveler(
    db: Session,
    traveler_id: str,
    reference_date: date,
    *,
    rules: ComplianceRules,
    table: JurisdictionTable,
    jurisdiction: str = SCHENGEN,
) -> list[Alert]:
    """Ranked alerts for one traveler. Bad records are skipped and logged, not fatal.

    A pooled history too long to scan is logged too; overstay checks still run.
    """
    records = get_stay_records(db, traveler_id)
    pool = table.get(jurisdiction)
    alerts, result = build_alerts(records, pool, reference_date, rules=rules, table=table, strict=False)
    if result is None:
        log.warning("[Compliance] traveler=%s %s check skipped: history too long to scan", traveler_id, pool.code)
    elif result.rejected_record_ids:
        log.warning(
            "[Compliance] traveler=%s skipped invalid records: %s",
            traveler_id, ", ".join(result.rejected_record_ids),
        )
    return alerts


def run_compliance_check_job(
    reference_date: date | None = None,
    dispatch: Dispatcher | None = None,
    db: Session | None = None,
) -> dict[str, list[Alert]]:
    """Run once per day (or on demand). Returns alerts per traveler that had any."""
    settings = get_settings()
    reference_date = reference_date or date.today()
    dispatch = dispatch or log_dispatch
    rules = ComplianceRules.from_settings(settings)
    table = JurisdictionTable.default(settings.schengen_version or None)

    own_session = db is None
    db = db or SessionLocal()
    out: dict[str, list[Alert]] = {}
    try:
        for traveler_id in list_traveler_ids(db):
            try:
                alerts = check_traveler(db, traveler_id, reference_date, rules=rules, table=table)
            except ComplianceError as e:
                log.warning("[Compliance] traveler=%s check failed: %s", traveler_id, e)
                continue
            if alerts:
                out[traveler_id] = alerts
                dispatch(traveler_id, alerts)
    finally:
        if own_session:
            db.close()
    log.info("[Compliance] checked as of %s: %d traveler(s) with alerts", reference_date.isoformat(), len(out))
    return out
