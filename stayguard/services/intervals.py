"""Interval Normalizer: validate raw stay records and turn them into closed day-intervals."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable

from stayguard.services.errors import UnclassifiedJurisdictionWarning, ValidationError
from stayguard.services.jurisdictions import Jurisdiction, JurisdictionTable

log = logging.getLogger("uvicorn.error")

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StayRecord:
    """One stay as supplied by the caller. ``exit_date`` None means still present."""

    id: str
    country: str
    entry_date: Any
    exit_date: Any = None
    visa_type: str | None = None
    max_stay_days: int | None = None
    expiry_date: Any = None
    notes: str | None = None


@dataclass(frozen=True)
class DayInterval:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError(
                f"Interval end {self.end.isoformat()} is before start {self.start.isoformat()}",
                field="end",
            )

    @classmethod
    def of_length(cls, start: date, days: int) -> "DayInterval":
        if days < 1:
            raise ValidationError("Interval length must be at least 1 day", field="days")
        return cls(start, start + timedelta(days=days - 1))

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def overlap_days(self, start: date, end: date) -> int:
        """Days shared with [start, end]; 0 if disjoint."""
        lo = max(self.start, start)
        hi = min(self.end, end)
        return (hi - lo).days + 1 if hi >= lo else 0


@dataclass(frozen=True)
class NormalizedRecord:
    record: StayRecord
    entry_date: date
    exit_date: date | None
    expiry_date: date | None
    # None when the stay has not started by the reference date
    interval: DayInterval | None
    jurisdiction: str | None


@dataclass(frozen=True)
class NormalizationResult:
    records: tuple[NormalizedRecord, ...] = ()
    rejected: tuple[ValidationError, ...] = ()
    unclassified: tuple[UnclassifiedJurisdictionWarning, ...] = ()

    def intervals_for(self, jurisdiction: Jurisdiction) -> list[DayInterval]:
        return [
            r.interval
            for r in self.records
            if r.interval is not None and r.record.country in jurisdiction
        ]

    @property
    def rejected_record_ids(self) -> tuple[str, ...]:
        return tuple(e.record_id for e in self.rejected if e.record_id is not None)

    @property
    def unclassified_record_ids(self) -> tuple[str, ...]:
        return tuple(w.record_id for w in self.unclassified)


def coerce_date(value: Any, *, record_id: str | None = None, field_name: str = "date") -> date:
    """Accept date, datetime (date part) or ISO YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(
        f"Malformed {field_name}: {value!r} (expected YYYY-MM-DD)",
        record_id=record_id,
        field=field_name,
    )


def _optional_date(value: Any, record_id: str, field_name: str) -> date | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return coerce_date(value, record_id=record_id, field_name=field_name)


def normalize_record(record: StayRecord, reference_date: date, table: JurisdictionTable) -> NormalizedRecord:
    rid = str(record.id)
    country = (record.country or "").strip().upper()
    if not country:
        raise ValidationError("Country is required", record_id=rid, field="country")
    entry = coerce_date(record.entry_date, record_id=rid, field_name="entry_date")
    exit_ = _optional_date(record.exit_date, rid, "exit_date")
    expiry = _optional_date(record.expiry_date, rid, "expiry_date")
    if exit_ is not None and entry > exit_:
        raise ValidationError(
            f"Entry date {entry.isoformat()} is after exit date {exit_.isoformat()}",
            record_id=rid,
            field="exit_date",
        )
    if record.max_stay_days is not None and record.max_stay_days < 0:
        raise ValidationError("max_stay_days cannot be negative", record_id=rid, field="max_stay_days")

    if exit_ is not None:
        interval = DayInterval(entry, exit_)
    elif entry <= reference_date:
        interval = DayInterval(entry, reference_date)
    else:
        interval = None
    return NormalizedRecord(
        record=record,
        entry_date=entry,
        exit_date=exit_,
        expiry_date=expiry,
        interval=interval,
        jurisdiction=table.classify(country),
    )


def normalize_records(
    records: Iterable[StayRecord],
    reference_date: date,
    table: JurisdictionTable | None = None,
    strict: bool = True,
) -> NormalizationResult:
    """Validate and resolve every record against ``reference_date``.

    Strict mode raises the first ValidationError. Otherwise invalid records
    are dropped and returned in ``rejected``. Records outside every known
    jurisdiction are kept, tagged unclassified and reported.
    """
    table = table or JurisdictionTable.default()
    out: list[NormalizedRecord] = []
    rejected: list[ValidationError] = []
    unclassified: list[UnclassifiedJurisdictionWarning] = []
    for record in records:
        try:
            nr = normalize_record(record, reference_date, table)
        except ValidationError as e:
            if e.record_id is None:
                e.record_id = str(record.id)
            if strict:
                raise
            rejected.append(e)
            continue
        if nr.jurisdiction is None:
            w = UnclassifiedJurisdictionWarning(str(record.id), record.country)
            log.debug("%s", w)
            unclassified.append(w)
        out.append(nr)
    return NormalizationResult(tuple(out), tuple(rejected), tuple(unclassified))
