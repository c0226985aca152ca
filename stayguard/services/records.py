"""Read-only access to stored stay records, as snapshots for the engine."""
from sqlalchemy.orm import Session

from stayguard.models.stay_record import StayRecordRow
from stayguard.services.intervals import StayRecord


def to_stay_record(row: StayRecordRow) -> StayRecord:
    return StayRecord(
        id=str(row.id),
        country=row.country,
        entry_date=row.entry_date,
        exit_date=row.exit_date,
        visa_type=row.visa_type,
        max_stay_days=row.max_stay_days,
        expiry_date=row.expiry_date,
        notes=row.notes,
    )


def get_stay_records(db: Session, traveler_id: str) -> list[StayRecord]:
    """All records for one traveler, read in a single query so the snapshot is consistent."""
    rows = (
        db.query(StayRecordRow)
        .filter(StayRecordRow.traveler_id == traveler_id)
        .order_by(StayRecordRow.entry_date, StayRecordRow.id)
        .all()
    )
    return [to_stay_record(r) for r in rows]


def list_traveler_ids(db: Session) -> list[str]:
    rows = db.query(StayRecordRow.traveler_id).distinct().order_by(StayRecordRow.traveler_id).all()
    return [r[0] for r in rows]
