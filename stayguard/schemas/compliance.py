"""Compliance engine request/response schemas."""
from datetime import date
from pydantic import BaseModel, Field

from stayguard.schemas.stay import StayRecordIn
from stayguard.services.jurisdictions import SCHENGEN


class ComplianceRequest(BaseModel):
    records: list[StayRecordIn]
    jurisdiction: str = SCHENGEN
    reference_date: date
    horizon: date | None = None  # last date to scan for violations (default reference_date)
    strict: bool | None = None  # None = server default


class ViolationResponse(BaseModel):
    date: date
    days_over_limit: int
    description: str


class ComplianceResultResponse(BaseModel):
    used_days: int
    remaining_days: int
    is_compliant: bool
    violations: list[ViolationResponse]
    next_reset_date: date | None
    reference_date: date
    max_days: int
    window_days: int
    capacity_release_date: date | None = None
    jurisdiction: str | None = None
    unclassified_record_ids: list[str] = []
    rejected_record_ids: list[str] = []


class FutureTripRequest(BaseModel):
    records: list[StayRecordIn]
    jurisdiction: str = SCHENGEN
    reference_date: date
    start_date: date
    end_date: date
    country: str | None = None  # destination; non-members short-circuit
    strict: bool | None = None


class FutureTripResponse(BaseModel):
    violates_rule: bool
    days_used_after_trip: int
    remaining_days_after_trip: int
    max_additional_safe_days: int
    earliest_safe_start_date: date | None
    warnings: list[str]
    suggestions: list[str]
    trip_start: date
    trip_end: date
    trip_days: int
    first_violation_date: date | None = None
    applies: bool = True


class OverstayRequest(BaseModel):
    records: list[StayRecordIn]
    reference_date: date
    lookahead_days: int | None = Field(None, ge=0)
    strict: bool | None = None


class OverstayWarningResponse(BaseModel):
    record_id: str
    country: str
    severity: str
    current_stay_days: int
    max_stay_days: int | None
    days_remaining: int
    must_exit_by: date
    limiting_factor: str
    message: str
    recommendations: list[str]
    expiry_date: date | None = None


class OverstaySummaryResponse(BaseModel):
    total: int
    critical: int
    high: int
    medium: int
    low: int


class OverstayReportResponse(BaseModel):
    warnings: list[OverstayWarningResponse]
    summary: OverstaySummaryResponse


class TripOverstayRequest(BaseModel):
    records: list[StayRecordIn]
    reference_date: date
    country: str
    start_date: date
    end_date: date
    strict: bool | None = None


class TripOverstayPredictionResponse(BaseModel):
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
    warnings: list[str]


class AlertsRequest(BaseModel):
    records: list[StayRecordIn]
    jurisdiction: str = SCHENGEN
    reference_date: date
    horizon: date | None = None
    lookahead_days: int | None = Field(None, ge=0)
    strict: bool | None = None


class AlertResponse(BaseModel):
    severity: str
    title: str
    body: str
    data: dict
