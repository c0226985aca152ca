"""Rule constants and severity tiers shared by the evaluator, monitor and formatter."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stayguard.config import Settings


class Severity(str, enum.Enum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"

    @property
    def rank(self) -> int:
        """0 is most severe."""
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = [Severity.critical, Severity.high, Severity.medium, Severity.low]

# Days-remaining thresholds, inclusive
HIGH_THRESHOLD_DAYS = 7
MEDIUM_THRESHOLD_DAYS = 14


def severity_for_days_remaining(days_remaining: int, lookahead_days: int) -> Severity | None:
    """Tier a days-remaining figure. None means outside the look-ahead horizon (no warning)."""
    if days_remaining <= 0:
        return Severity.critical
    if days_remaining > lookahead_days:
        return None
    if days_remaining <= HIGH_THRESHOLD_DAYS:
        return Severity.high
    if days_remaining <= MEDIUM_THRESHOLD_DAYS:
        return Severity.medium
    return Severity.low


@dataclass(frozen=True)
class ComplianceRules:
    """At most ``max_days`` of presence in any ``window_days``-day trailing window."""

    max_days: int = 90
    window_days: int = 180
    lookahead_days: int = 30
    max_scan_range_days: int = 3650

    def __post_init__(self) -> None:
        if self.max_days < 0 or self.window_days < 1:
            raise ValueError("max_days must be >= 0 and window_days >= 1")
        if self.max_scan_range_days < 1:
            raise ValueError("max_scan_range_days must be >= 1")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ComplianceRules":
        return cls(
            max_days=settings.rule_max_days,
            window_days=settings.rule_window_days,
            lookahead_days=settings.lookahead_days,
            max_scan_range_days=settings.max_scan_range_days,
        )


SCHENGEN_RULES = ComplianceRules()
