"""Day-Set Unifier and Rolling-Window Counter.

Presence in a pooled jurisdiction is kept as sorted, disjoint runs of days.
Overlapping or adjacent records (two member states on one travel day,
duplicate entries) merge into one run, so each calendar day counts once.
Window counts clip every run against the window instead of walking days.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator

from stayguard.services.intervals import ONE_DAY, DayInterval


def merge_intervals(intervals: Iterable[DayInterval]) -> tuple[DayInterval, ...]:
    ordered = sorted(intervals, key=lambda i: (i.start, i.end))
    if not ordered:
        return ()
    merged: list[DayInterval] = []
    cur = ordered[0]
    for iv in ordered[1:]:
        if iv.start <= cur.end + ONE_DAY:
            # Overlapping or contiguous
            if iv.end > cur.end:
                cur = DayInterval(cur.start, iv.end)
        else:
            merged.append(cur)
            cur = iv
    merged.append(cur)
    return tuple(merged)


@dataclass(frozen=True)
class DaySet:
    runs: tuple[DayInterval, ...] = ()

    @classmethod
    def from_intervals(cls, intervals: Iterable[DayInterval]) -> "DaySet":
        return cls(merge_intervals(intervals))

    def with_interval(self, interval: DayInterval) -> "DaySet":
        return DaySet(merge_intervals([*self.runs, interval]))

    def truncated_after(self, last_day: date) -> "DaySet":
        """Drop every day after ``last_day``."""
        runs = []
        for run in self.runs:
            if run.start > last_day:
                break
            runs.append(run if run.end <= last_day else DayInterval(run.start, last_day))
        return DaySet(tuple(runs))

    @property
    def first_day(self) -> date | None:
        return self.runs[0].start if self.runs else None

    @property
    def last_day(self) -> date | None:
        return self.runs[-1].end if self.runs else None

    @property
    def total_days(self) -> int:
        return sum(r.days for r in self.runs)

    def __bool__(self) -> bool:
        return bool(self.runs)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and any(r.start <= day <= r.end for r in self.runs)

    def count_between(self, start: date, end: date) -> int:
        if end < start:
            return 0
        return sum(r.overlap_days(start, end) for r in self.runs)

    def days_between(self, start: date, end: date) -> Iterator[date]:
        """Present days in [start, end], ascending."""
        for run in self.runs:
            lo = max(run.start, start)
            hi = min(run.end, end)
            d = lo
            while d <= hi:
                yield d
                d += ONE_DAY


def window_start(reference_date: date, window_days: int) -> date:
    return reference_date - timedelta(days=window_days - 1)


def days_in_window(day_set: DaySet, reference_date: date, window_days: int) -> int:
    """Present days in the trailing window [D - (N - 1), D]."""
    return day_set.count_between(window_start(reference_date, window_days), reference_date)
