"""Stay record schemas (records snapshot supplied by the caller)."""
from datetime import date
from pydantic import BaseModel

from stayguard.services.intervals import StayRecord


class StayRecordIn(BaseModel):
    id: str
    country: str
    entry_date: date
    exit_date: date | None = None  # None = still present
    visa_type: str | None = None
    max_stay_days: int | None = None
    expiry_date: date | None = None
    notes: str | None = None

    class Config:
        from_attributes = True

    def to_record(self) -> StayRecord:
        return StayRecord(**self.model_dump())
