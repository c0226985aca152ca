"""Generic Overstay Monitor: per-record max continuous stay and document expiry checks."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from stayguard.services.intervals import DayInterval, NormalizedRecord
from stayguard.services.rules import Severity, severity_for_days_remaining

MAX_STAY = "max_stay"
DOCUMENT_EXPIRY = "document_expiry"


@dataclass(frozen=True)
class OverstayWarning:
    record_id: str
    country: str
    severity: Severity
    current_stay_days: int
    max_stay_days: int | None
    days_remaining: int
    must_exit_by: date
    limiting_factor: str
    message: str
    recommendations: tuple[str, ...]
    expiry_date: date | None = None

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "country": self.country,
            "severity": self.severity.value,
            "current_stay_days": self.current_stay_days,
            "max_stay_days": self.max_stay_days,
            "days_remaining": self.days_remaining,
            "must_exit_by": self.must_exit_by.isoformat(),
            "limiting_factor": self.limiting_factor,
            "message": self.message,
            "recommendations": list(self.recommendations),
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
        }


def is_open_on(nr: NormalizedRecord, reference_date: date) -> bool:
    return nr.entry_date <= reference_date and (nr.exit_date is None or nr.exit_date >= reference_date)


def _message(country: str, days_remaining: int, limiting_factor: str, must_exit_by: date) -> str:
    what = "permitted stay" if limiting_factor == MAX_STAY else "document validity"
    if days_remaining < 0:
        return f"{country}: {what} exceeded by {-days_remaining} day(s) (ended {must_exit_by.isoformat()})."
    if days_remaining == 0:
        return f"{country}: today is the last day of your {what}."
    return f"{country}: {days_remaining} day(s) of {what} remaining (exit by {must_exit_by.isoformat()})."


def _recommendations(severity: Severity, days_remaining: int, must_exit_by: date) -> tuple[str, ...]:
    exit_by = must_exit_by.isoformat()
    if days_remaining < 0:
        return (
            "Leave immediately",
            "Contact the local immigration office and explain your situation",
            "Expect possible fines or future entry refusal",
        )
    if severity is Severity.critical:
        return (
            f"Exit no later than today ({exit_by})",
            "File an extension today if you are eligible",
        )
    if severity is Severity.high:
        return (
            f"Plan exit before {exit_by}",
            "Book your departure now",
            "File an extension if you need to stay longer",
        )
    if severity is Severity.medium:
        return (
            f"Plan exit before {exit_by}",
            "Check whether an extension is possible",
        )
    return (f"Plan exit before {exit_by}",)


def check_record(nr: NormalizedRecord, reference_date: date, lookahead_days: int) -> OverstayWarning | None:
    """Warning for one open record, or None when it has no limit or is beyond the look-ahead."""
    if not is_open_on(nr, reference_date):
        return None
    record = nr.record
    current = (reference_date - nr.entry_date).days + 1

    limits: list[tuple[int, str]] = []
    if record.max_stay_days is not None:
        limits.append((record.max_stay_days - current, MAX_STAY))
    if nr.expiry_date is not None:
        limits.append(((nr.expiry_date - reference_date).days, DOCUMENT_EXPIRY))
    if not limits:
        return None
    days_remaining, factor = min(limits, key=lambda x: x[0])

    severity = severity_for_days_remaining(days_remaining, lookahead_days)
    if severity is None:
        return None
    must_exit_by = reference_date + timedelta(days=days_remaining)
    country = (record.country or "").strip().upper()
    return OverstayWarning(
        record_id=str(record.id),
        country=country,
        severity=severity,
        current_stay_days=current,
        max_stay_days=record.max_stay_days,
        days_remaining=days_remaining,
        must_exit_by=must_exit_by,
        limiting_factor=factor,
        message=_message(country, days_remaining, factor, must_exit_by),
        recommendations=_recommendations(severity, days_remaining, must_exit_by),
        expiry_date=nr.expiry_date,
    )


def monitor_overstays(
    records: Iterable[NormalizedRecord],
    reference_date: date,
    lookahead_days: int = 30,
) -> list[OverstayWarning]:
    warnings = [
        w for w in (check_record(nr, reference_date, lookahead_days) for nr in records) if w is not None
    ]
    warnings.sort(key=lambda w: (w.severity.rank, w.days_remaining, w.record_id))
    return warnings


def summarize_overstays(warnings: Iterable[OverstayWarning]) -> dict[str, int]:
    """Counts per severity plus the total, for dashboards and notification digests."""
    summary = {"total": 0, **{s.value: 0 for s in Severity}}
    for w in warnings:
        summary["total"] += 1
        summary[w.severity.value] += 1
    return summary


@dataclass(frozen=True)
class TripOverstayPrediction:
    country: str
    trip_start: date
    trip_end: date
    planned_stay_days: int
    will_exceed: bool
    max_stay_days: int | None
    expiry_date: date | None
    latest_exit_date: date | None
    limiting_factor: str | None
    record_id: str | None
    warnings: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "country": self.country,
            "trip_start": self.trip_start.isoformat(),
            "trip_end": self.trip_end.isoformat(),
            "planned_stay_days": self.planned_stay_days,
            "will_exceed": self.will_exceed,
            "max_stay_days": self.max_stay_days,
            "expiry_date": self.expiry_date.isoformat() if self.expiry_date else None,
            "latest_exit_date": self.latest_exit_date.isoformat() if self.latest_exit_date else None,
            "limiting_factor": self.limiting_factor,
            "record_id": self.record_id,
            "warnings": list(self.warnings),
        }


def visa_for_country(records: Iterable[NormalizedRecord], country: str) -> NormalizedRecord | None:
    """Latest record for ``country`` that carries a stay limit or a document expiry."""
    country = country.strip().upper()
    candidates = [
        nr for nr in records
        if (nr.record.country or "").strip().upper() == country
        and (nr.record.max_stay_days is not None or nr.expiry_date is not None)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda nr: (nr.entry_date, str(nr.record.id)))


def predict_trip_overstay(trip: DayInterval, country: str, visa: NormalizedRecord | None) -> TripOverstayPrediction:
    """Check a planned stay against the limits of the traveler's visa record for that country.

    A trip to a country with no limits on file is not flagged.
    """
    country = country.strip().upper()
    planned = trip.days
    if visa is None:
        return TripOverstayPrediction(
            country=country,
            trip_start=trip.start,
            trip_end=trip.end,
            planned_stay_days=planned,
            will_exceed=False,
            max_stay_days=None,
            expiry_date=None,
            latest_exit_date=None,
            limiting_factor=None,
            record_id=None,
            warnings=(f"{country}: no stay limit or visa expiry on file; check the entry requirements.",),
        )

    max_stay = visa.record.max_stay_days
    expiry = visa.expiry_date
    exits: list[tuple[date, str]] = []
    warnings = []
    if max_stay is not None:
        exits.append((trip.start + timedelta(days=max_stay - 1), MAX_STAY))
        if planned > max_stay:
            warnings.append(
                f"{country}: planned stay of {planned} day(s) exceeds the permitted {max_stay} day(s)."
            )
    if expiry is not None:
        exits.append((expiry, DOCUMENT_EXPIRY))
        if trip.end > expiry:
            warnings.append(
                f"{country}: planned exit {trip.end.isoformat()} is after the visa expiry on {expiry.isoformat()}."
            )
    latest_exit, factor = min(exits, key=lambda x: x[0])
    if warnings:
        if latest_exit < trip.start:
            warnings.append(f"{country}: the visa does not cover any day of this trip.")
        else:
            warnings.append(f"Exit {country} no later than {latest_exit.isoformat()}.")
    return TripOverstayPrediction(
        country=country,
        trip_start=trip.start,
        trip_end=trip.end,
        planned_stay_days=planned,
        will_exceed=bool(warnings),
        max_stay_days=max_stay,
        expiry_date=expiry,
        latest_exit_date=latest_exit,
        limiting_factor=factor,
        record_id=str(visa.record.id),
        warnings=tuple(warnings),
    )
