"""Compliance Evaluator: apply "at most M days in any N-day window" across a date range."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta

from stayguard.services.day_set import DaySet, days_in_window, window_start
from stayguard.services.errors import RangeTooLargeError
from stayguard.services.intervals import ONE_DAY
from stayguard.services.rules import ComplianceRules, SCHENGEN_RULES


@dataclass(frozen=True)
class Violation:
    date: date
    days_over_limit: int
    description: str

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "days_over_limit": self.days_over_limit,
            "description": self.description,
        }


@dataclass(frozen=True)
class ComplianceResult:
    used_days: int
    remaining_days: int
    is_compliant: bool
    violations: tuple[Violation, ...]
    next_reset_date: date | None
    reference_date: date
    max_days: int
    window_days: int
    capacity_release_date: date | None = None
    jurisdiction: str | None = None
    unclassified_record_ids: tuple[str, ...] = ()
    rejected_record_ids: tuple[str, ...] = field(default=())

    def to_dict(self) -> dict:
        return {
            "used_days": self.used_days,
            "remaining_days": self.remaining_days,
            "is_compliant": self.is_compliant,
            "violations": [v.to_dict() for v in self.violations],
            "next_reset_date": _iso(self.next_reset_date),
            "reference_date": self.reference_date.isoformat(),
            "max_days": self.max_days,
            "window_days": self.window_days,
            "capacity_release_date": _iso(self.capacity_release_date),
            "jurisdiction": self.jurisdiction,
            "unclassified_record_ids": list(self.unclassified_record_ids),
            "rejected_record_ids": list(self.rejected_record_ids),
        }


def _iso(d: date | None) -> str | None:
    return d.isoformat() if d is not None else None


def check_scan_range(start: date, end: date, rules: ComplianceRules) -> int:
    """Length of [start, end] in days; raises if over the configured cap."""
    span = (end - start).days + 1
    if span > rules.max_scan_range_days:
        raise RangeTooLargeError(span, rules.max_scan_range_days)
    return span


def find_violations(day_set: DaySet, start: date, end: date, rules: ComplianceRules) -> list[Violation]:
    if end < start:
        return []
    check_scan_range(start, end, rules)
    out = []
    d = start
    while d <= end:
        used = days_in_window(day_set, d, rules.window_days)
        if used > rules.max_days:
            out.append(Violation(
                date=d,
                days_over_limit=used - rules.max_days,
                description=(
                    f"{used} days used in the {rules.window_days}-day window ending "
                    f"{d.isoformat()} (limit: {rules.max_days} days)"
                ),
            ))
        d += ONE_DAY
    return out


def next_reset_date(day_set: DaySet, reference_date: date, rules: ComplianceRules) -> date | None:
    """First date after ``reference_date`` back within the limit, assuming no further travel.

    None when the traveler is already within the limit on ``reference_date``.
    """
    if days_in_window(day_set, reference_date, rules.window_days) <= rules.max_days:
        return None
    past = day_set.truncated_after(reference_date)
    candidate = reference_date + ONE_DAY
    last = reference_date + timedelta(days=rules.window_days)
    while candidate <= last:
        if days_in_window(past, candidate, rules.window_days) <= rules.max_days:
            return candidate
        candidate += ONE_DAY
    return last


def capacity_release_date(day_set: DaySet, reference_date: date, rules: ComplianceRules) -> date | None:
    """Next date on which a day counted at ``reference_date`` drops out of the window."""
    lo = window_start(reference_date, rules.window_days)
    for run in day_set.runs:
        if run.end >= lo and run.start <= reference_date:
            return max(run.start, lo) + timedelta(days=rules.window_days)
    return None


def evaluate_compliance(
    day_set: DaySet,
    reference_date: date,
    rules: ComplianceRules = SCHENGEN_RULES,
    scan_start: date | None = None,
    horizon: date | None = None,
) -> ComplianceResult:
    """Evaluate the rolling-window rule at ``reference_date`` and flag every violating date.

    The scan covers ``scan_start`` (default: first day present) through
    ``horizon`` (default: ``reference_date``). A window count equal to the
    limit is compliant.
    """
    horizon = horizon or reference_date
    start = scan_start or day_set.first_day or reference_date
    violations = find_violations(day_set, start, horizon, rules)

    used = days_in_window(day_set, reference_date, rules.window_days)
    return ComplianceResult(
        used_days=used,
        remaining_days=max(0, rules.max_days - used),
        is_compliant=used <= rules.max_days,
        violations=tuple(violations),
        next_reset_date=next_reset_date(day_set, reference_date, rules),
        reference_date=reference_date,
        max_days=rules.max_days,
        window_days=rules.window_days,
        capacity_release_date=capacity_release_date(day_set, reference_date, rules),
    )
