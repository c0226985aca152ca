"""Warning Formatter: turn engine results into ranked, de-duplicated alerts. No I/O."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from stayguard.services.errors import RangeTooLargeError
from stayguard.services.evaluator import ComplianceResult
from stayguard.services.jurisdictions import Jurisdiction
from stayguard.services.overstay import OverstayWarning
from stayguard.services.rules import Severity, severity_for_days_remaining
from stayguard.services.simulator import FutureTripResult


@dataclass(frozen=True)
class Alert:
    severity: Severity
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    days_remaining: int | None = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "title": self.title,
            "body": self.body,
            "data": dict(self.data),
        }


def compliance_alerts(
    result: ComplianceResult,
    jurisdiction_name: str = "Schengen Area",
    lookahead_days: int = 30,
) -> list[Alert]:
    rule = f"{result.max_days}/{result.window_days}"
    data = result.to_dict()
    if not result.is_compliant:
        over = result.used_days - result.max_days
        body = (
            f"{result.used_days} days used in the last {result.window_days} days, "
            f"{over} over the {result.max_days}-day limit. Leave the {jurisdiction_name} immediately."
        )
        if result.next_reset_date:
            body += f" Without further travel you are back within the limit on {result.next_reset_date.isoformat()}."
        return [Alert(Severity.critical, f"{jurisdiction_name} {rule} rule violated", body, data, -over)]

    alerts = violation_alerts(result, jurisdiction_name)
    if result.remaining_days == 0:
        body = (
            f"All {result.max_days} days are used. Any further day in the {jurisdiction_name} "
            f"is a violation."
        )
        if result.capacity_release_date:
            body += f" The next day frees up on {result.capacity_release_date.isoformat()}."
        alerts.append(Alert(Severity.high, f"{jurisdiction_name} limit reached", body, data, 0))
        return alerts

    severity = severity_for_days_remaining(result.remaining_days, lookahead_days)
    if severity is not None:
        body = (
            f"{result.remaining_days} of {result.max_days} days remaining in the "
            f"{jurisdiction_name} as of {result.reference_date.isoformat()}."
        )
        alerts.append(Alert(severity, f"{jurisdiction_name} days running low", body, data, result.remaining_days))
    return alerts


def violation_alerts(result: ComplianceResult, jurisdiction_name: str = "Schengen Area") -> list[Alert]:
    """Violating dates found by the scan on either side of the reference date.

    Dates after the reference date come from recorded future presence and are
    high; dates before it are past overstays and are low.
    """
    rule = f"{result.max_days}/{result.window_days}"
    ahead = [v for v in result.violations if v.date > result.reference_date]
    past = [v for v in result.violations if v.date < result.reference_date]
    out = []
    if ahead:
        first = ahead[0]
        worst = max(v.days_over_limit for v in ahead)
        lead = (first.date - result.reference_date).days
        body = (
            f"Planned presence breaks the {rule} rule on {first.date.isoformat()}, in {lead} day(s). "
            f"{len(ahead)} day(s) over the limit, at most {worst} over. "
            f"Shorten or move the planned stay."
        )
        data = {
            "jurisdiction": result.jurisdiction,
            "first_violation_date": first.date.isoformat(),
            "violating_days": len(ahead),
            "max_days_over_limit": worst,
        }
        out.append(Alert(Severity.high, f"{jurisdiction_name} {rule} rule will be violated", body, data, lead))
    if past:
        first, last = past[0], past[-1]
        body = (
            f"{len(past)} day(s) over the {rule} limit between {first.date.isoformat()} and "
            f"{last.date.isoformat()}. Past overstays can be raised at future border checks."
        )
        data = {
            "jurisdiction": result.jurisdiction,
            "first_violation_date": first.date.isoformat(),
            "last_violation_date": last.date.isoformat(),
            "violating_days": len(past),
        }
        out.append(Alert(Severity.low, f"Past {jurisdiction_name} {rule} violation", body, data))
    return out


def range_alert(error: RangeTooLargeError, jurisdiction: Jurisdiction) -> Alert:
    """The pooled check was skipped because the recorded history is too long to scan."""
    body = (
        f"{error} The {jurisdiction.name} check was skipped; per-visa stay limits were still checked."
    )
    data = {
        "jurisdiction": jurisdiction.code,
        "requested_days": error.requested_days,
        "max_days": error.max_days,
    }
    return Alert(Severity.medium, f"{jurisdiction.name} history too long to check", body, data)


def trip_alerts(result: FutureTripResult, jurisdiction_name: str = "Schengen Area") -> list[Alert]:
    if not result.violates_rule:
        return []
    body = " ".join([*result.warnings, *result.suggestions])
    title = f"Planned trip {result.trip_start.isoformat()} to {result.trip_end.isoformat()} breaks the {jurisdiction_name} rule"
    lead = None
    if result.first_violation_date is not None:
        lead = (result.first_violation_date - result.trip_start).days
    return [Alert(Severity.high, title, body, result.to_dict(), lead)]


def overstay_alerts(warnings: Iterable[OverstayWarning]) -> list[Alert]:
    out = []
    for w in warnings:
        if w.days_remaining < 0:
            title = f"Overstay in {w.country}"
        elif w.days_remaining == 0:
            title = f"Last permitted day in {w.country}"
        else:
            title = f"Stay limit approaching in {w.country}"
        body = " ".join([w.message, *w.recommendations])
        out.append(Alert(w.severity, title, body, w.to_dict(), w.days_remaining))
    return out


def rank_alerts(alerts: Iterable[Alert]) -> list[Alert]:
    """Drop duplicates (same severity, title and body) and order most urgent first."""
    seen = set()
    unique = []
    for a in alerts:
        key = (a.severity, a.title, a.body)
        if key in seen:
            continue
        seen.add(key)
        unique.append(a)

    def sort_key(a: Alert):
        soon = a.days_remaining if a.days_remaining is not None else float("inf")
        return (a.severity.rank, soon)

    return sorted(unique, key=sort_key)


def format_alerts(
    compliance_results: Iterable[ComplianceResult] = (),
    overstay_warnings: Iterable[OverstayWarning] = (),
    trip_results: Iterable[FutureTripResult] = (),
    jurisdiction_name: str = "Schengen Area",
    lookahead_days: int = 30,
) -> list[Alert]:
    alerts: list[Alert] = []
    for r in compliance_results:
        alerts.extend(compliance_alerts(r, jurisdiction_name, lookahead_days))
    for t in trip_results:
        alerts.extend(trip_alerts(t, jurisdiction_name))
    alerts.extend(overstay_alerts(overstay_warnings))
    return rank_alerts(alerts)
