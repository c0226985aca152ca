"""Future-Trip Simulator: project a hypothetical trip onto the day set and re-check the rule."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from stayguard.services.day_set import DaySet, days_in_window
from stayguard.services.evaluator import check_scan_range
from stayguard.services.intervals import ONE_DAY, DayInterval
from stayguard.services.rules import ComplianceRules, SCHENGEN_RULES


@dataclass(frozen=True)
class FutureTripResult:
    violates_rule: bool
    days_used_after_trip: int
    remaining_days_after_trip: int
    max_additional_safe_days: int
    earliest_safe_start_date: date | None
    warnings: tuple[str, ...]
    suggestions: tuple[str, ...]
    trip_start: date
    trip_end: date
    trip_days: int
    first_violation_date: date | None = None
    applies: bool = True

    def to_dict(self) -> dict:
        return {
            "violates_rule": self.violates_rule,
            "days_used_after_trip": self.days_used_after_trip,
            "remaining_days_after_trip": self.remaining_days_after_trip,
            "max_additional_safe_days": self.max_additional_safe_days,
            "earliest_safe_start_date": _iso(self.earliest_safe_start_date),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "trip_start": self.trip_start.isoformat(),
            "trip_end": self.trip_end.isoformat(),
            "trip_days": self.trip_days,
            "first_violation_date": _iso(self.first_violation_date),
            "applies": self.applies,
        }


def _iso(d: date | None) -> str | None:
    return d.isoformat() if d is not None else None


def first_violation(day_set: DaySet, trip: DayInterval, rules: ComplianceRules) -> date | None:
    """First day the trip pushes over the limit, or None if the trip is safe.

    Only days the traveler is present can raise the window count, so checking
    present days from trip start to the last day the trip is still inside the
    window is enough.
    """
    combined = day_set.with_interval(trip)
    last_affected = trip.end + timedelta(days=rules.window_days - 1)
    for d in combined.days_between(trip.start, last_affected):
        if days_in_window(combined, d, rules.window_days) > rules.max_days:
            return d
    return None


def trip_is_safe(day_set: DaySet, start: date, days: int, rules: ComplianceRules) -> bool:
    if days <= 0:
        return True
    return first_violation(day_set, DayInterval.of_length(start, days), rules) is None


def max_safe_trip_days(day_set: DaySet, start: date, rules: ComplianceRules) -> int:
    """Longest trip from ``start`` that stays compliant every day. Binary search over 0..M.

    Safe lengths are monotone: dropping the last day of a safe trip never
    raises any window count.
    """
    lo, hi = 0, rules.max_days
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if trip_is_safe(day_set, start, mid, rules):
            lo = mid
        else:
            hi = mid - 1
    return lo


def earliest_safe_start(
    day_set: DaySet,
    start: date,
    days: int,
    reference_date: date,
    rules: ComplianceRules,
) -> date | None:
    """Smallest start >= ``start`` for a fully compliant ``days``-day trip, or None."""
    if days > rules.max_days:
        return None
    last = max(start, reference_date) + timedelta(days=rules.window_days)
    check_scan_range(start, last, rules)
    candidate = start
    while candidate <= last:
        if trip_is_safe(day_set, candidate, days, rules):
            return candidate
        candidate += ONE_DAY
    return None


def simulate_trip(
    day_set: DaySet,
    trip: DayInterval,
    reference_date: date,
    rules: ComplianceRules = SCHENGEN_RULES,
) -> FutureTripResult:
    """Check a candidate trip against existing presence without persisting anything."""
    check_scan_range(trip.start, trip.end, rules)
    combined = day_set.with_interval(trip)
    violation_day = first_violation(day_set, trip, rules)
    used_after = days_in_window(combined, trip.end, rules.window_days)
    max_safe = max_safe_trip_days(day_set, trip.start, rules)
    if violation_day is None:
        earliest = trip.start
    else:
        earliest = earliest_safe_start(day_set, trip.start, trip.days, reference_date, rules)

    warnings: list[str] = []
    suggestions: list[str] = []
    if violation_day is not None:
        day_no = (violation_day - trip.start).days + 1
        if violation_day <= trip.end:
            warnings.append(
                f"This trip breaks the {rules.max_days}/{rules.window_days} rule on "
                f"{violation_day.isoformat()} (day {day_no} of {trip.days})."
            )
        else:
            warnings.append(
                f"This trip leads to a violation on {violation_day.isoformat()}, "
                f"after the trip, during later planned presence."
            )
        if max_safe > 0:
            safe_end = trip.start + timedelta(days=max_safe - 1)
            suggestions.append(
                f"Starting {trip.start.isoformat()} you can stay at most {max_safe} days "
                f"(exit by {safe_end.isoformat()})."
            )
        else:
            suggestions.append(f"No days are available starting {trip.start.isoformat()}.")
        if earliest is not None:
            suggestions.append(
                f"The earliest start for a {trip.days}-day trip is {earliest.isoformat()}."
            )
        elif trip.days > rules.max_days:
            suggestions.append(
                f"A {trip.days}-day trip exceeds the {rules.max_days}-day limit on its own; "
                f"split it or apply for a long-stay visa."
            )
        else:
            suggestions.append("No compliant start date found within the search window.")
    else:
        suggestions.append("The planned trip complies with the rule.")
        suggestions.append(f"Days remaining after the trip: {max(0, rules.max_days - used_after)}.")

    return FutureTripResult(
        violates_rule=violation_day is not None,
        days_used_after_trip=used_after,
        remaining_days_after_trip=max(0, rules.max_days - used_after),
        max_additional_safe_days=max_safe,
        earliest_safe_start_date=earliest,
        warnings=tuple(warnings),
        suggestions=tuple(suggestions),
        trip_start=trip.start,
        trip_end=trip.end,
        trip_days=trip.days,
        first_violation_date=violation_day,
    )
