"""Compliance engine entry points.

Each call is a pure function of the records snapshot, the jurisdiction and
an explicit reference date. Nothing is read from the clock or cached.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable

from stayguard.services.alerts import Alert, format_alerts, range_alert, rank_alerts
from stayguard.services.day_set import DaySet
from stayguard.services.errors import RangeTooLargeError, ValidationError
from stayguard.services.evaluator import ComplianceResult, evaluate_compliance
from stayguard.services.intervals import DayInterval, NormalizationResult, StayRecord, normalize_records
from stayguard.services.jurisdictions import Jurisdiction, JurisdictionTable
from stayguard.services.overstay import (
    OverstayWarning,
    TripOverstayPrediction,
    monitor_overstays,
    predict_trip_overstay,
    visa_for_country,
)
from stayguard.services.rules import ComplianceRules, SCHENGEN_RULES
from stayguard.services.simulator import FutureTripResult, simulate_trip


def build_day_set(
    records: Iterable[StayRecord],
    jurisdiction: Jurisdiction,
    reference_date: date,
    table: JurisdictionTable,
    strict: bool = True,
) -> tuple[DaySet, NormalizationResult]:
    normalized = normalize_records(records, reference_date, table, strict=strict)
    return DaySet.from_intervals(normalized.intervals_for(jurisdiction)), normalized


def compute_jurisdiction_compliance(
    records: Iterable[StayRecord],
    jurisdiction: str | Jurisdiction,
    reference_date: date,
    *,
    rules: ComplianceRules | None = None,
    table: JurisdictionTable | None = None,
    strict: bool = True,
    horizon: date | None = None,
) -> ComplianceResult:
    rules = rules or SCHENGEN_RULES
    table = table or JurisdictionTable.default()
    pool = table.resolve(jurisdiction)
    day_set, normalized = build_day_set(records, pool, reference_date, table, strict)
    result = evaluate_compliance(day_set, reference_date, rules, horizon=horizon)
    return replace(
        result,
        jurisdiction=pool.code,
        unclassified_record_ids=normalized.unclassified_record_ids,
        rejected_record_ids=normalized.rejected_record_ids,
    )


def simulate_future_trip(
    records: Iterable[StayRecord],
    jurisdiction: str | Jurisdiction,
    candidate: DayInterval,
    reference_date: date,
    *,
    rules: ComplianceRules | None = None,
    table: JurisdictionTable | None = None,
    strict: bool = True,
    country: str | None = None,
) -> FutureTripResult:
    """Would ``candidate`` keep every day compliant? ``country`` is the optional destination."""
    rules = rules or SCHENGEN_RULES
    table = table or JurisdictionTable.default()
    pool = table.resolve(jurisdiction)
    if not isinstance(candidate, DayInterval):
        raise ValidationError("Candidate trip must be a day interval", field="candidate")

    if country is not None and country not in pool:
        return FutureTripResult(
            violates_rule=False,
            days_used_after_trip=0,
            remaining_days_after_trip=rules.max_days,
            max_additional_safe_days=candidate.days,
            earliest_safe_start_date=candidate.start,
            warnings=(),
            suggestions=(
                f"{country.strip().upper()} is not in the {pool.name}; the "
                f"{rules.max_days}/{rules.window_days} rule does not apply.",
            ),
            trip_start=candidate.start,
            trip_end=candidate.end,
            trip_days=candidate.days,
            applies=False,
        )

    day_set, _ = build_day_set(records, pool, reference_date, table, strict)
    return simulate_trip(day_set, candidate, reference_date, rules)


def check_overstay(
    records: Iterable[StayRecord],
    reference_date: date,
    lookahead_days: int = 30,
    *,
    strict: bool = True,
    table: JurisdictionTable | None = None,
) -> list[OverstayWarning]:
    normalized = normalize_records(records, reference_date, table, strict=strict)
    return monitor_overstays(normalized.records, reference_date, lookahead_days)


def predict_overstay_for_trip(
    records: Iterable[StayRecord],
    country: str,
    candidate: DayInterval,
    reference_date: date,
    *,
    strict: bool = True,
    table: JurisdictionTable | None = None,
) -> TripOverstayPrediction:
    """Would a planned stay in ``country`` outlast the visa on file for it?"""
    if not isinstance(candidate, DayInterval):
        raise ValidationError("Candidate trip must be a day interval", field="candidate")
    if not country or not country.strip():
        raise ValidationError("Destination country is required", field="country")
    normalized = normalize_records(records, reference_date, table, strict=strict)
    return predict_trip_overstay(candidate, country, visa_for_country(normalized.records, country))


def build_alerts(
    records: Iterable[StayRecord],
    jurisdiction: str | Jurisdiction,
    reference_date: date,
    *,
    rules: ComplianceRules | None = None,
    table: JurisdictionTable | None = None,
    strict: bool = True,
    lookahead_days: int | None = None,
    horizon: date | None = None,
) -> tuple[list[Alert], ComplianceResult | None]:
    """Ranked alerts for one snapshot, with the pooled result it was built from.

    The overstay checks run even when the pooled history is too long to
    scan; in that case the result is None and a range alert stands in for it.
    """
    rules = rules or SCHENGEN_RULES
    table = table or JurisdictionTable.default()
    pool = table.resolve(jurisdiction)
    records = list(records)
    lookahead = rules.lookahead_days if lookahead_days is None else lookahead_days

    result = None
    skipped = []
    try:
        result = compute_jurisdiction_compliance(
            records, pool, reference_date, rules=rules, table=table, strict=strict, horizon=horizon,
        )
    except RangeTooLargeError as e:
        skipped.append(range_alert(e, pool))
    warnings = check_overstay(records, reference_date, lookahead, strict=strict, table=table)
    alerts = format_alerts(
        [result] if result is not None else [],
        warnings,
        jurisdiction_name=pool.name,
        lookahead_days=lookahead,
    )
    return rank_alerts([*alerts, *skipped]), result
