"""Error taxonomy for the compliance engine. All failures are deterministic; nothing here is retried."""
from __future__ import annotations


class ComplianceError(Exception):
    """Base class for engine failures surfaced to the caller."""


class ValidationError(ComplianceError):
    """A record, candidate trip or jurisdiction reference is malformed."""

    def __init__(self, message: str, *, record_id: str | None = None, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.record_id = record_id
        self.field = field

    def to_dict(self) -> dict:
        return {"record_id": self.record_id, "field": self.field, "message": self.message}


class UnknownJurisdictionError(ValidationError):
    """The requested jurisdiction is not in the reference table."""


class RangeTooLargeError(ComplianceError):
    """A scan range is wider than the configured cap."""

    def __init__(self, requested_days: int, max_days: int):
        super().__init__(
            f"Scan range of {requested_days} days exceeds the maximum of {max_days} days."
        )
        self.requested_days = requested_days
        self.max_days = max_days


class UnclassifiedJurisdictionWarning(UserWarning):
    """Record country belongs to no known jurisdiction. Collected, never raised."""

    def __init__(self, record_id: str, country: str):
        super().__init__(f"Record {record_id}: country {country!r} is not in any known jurisdiction.")
        self.record_id = record_id
        self.country = country
