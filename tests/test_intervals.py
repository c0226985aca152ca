"""
test_intervals.py
-----------------
Normalizer: validation, open-ended resolution, jurisdiction tagging.
"""
from datetime import date, datetime

import pytest

from stayguard.services.errors import ValidationError
from stayguard.services.intervals import DayInterval, normalize_records
from stayguard.services.jurisdictions import JurisdictionTable, SCHENGEN

from tests.conftest import REF, days, rec

SCHENGEN_POOL = JurisdictionTable.default().get(SCHENGEN)


class TestNormalize:

    def test_open_stay_ends_on_reference_date(self):
        out = normalize_records([rec(1, "FR", REF - days(9))], REF)
        assert out.records[0].interval == DayInterval(REF - days(9), REF)
        assert out.records[0].interval.days == 10

    def test_open_stay_reresolved_per_call(self):
        records = [rec(1, "FR", REF)]
        first = normalize_records(records, REF)
        later = normalize_records(records, REF + days(5))
        assert first.records[0].interval.days == 1
        assert later.records[0].interval.days == 6

    def test_open_stay_not_started_has_no_interval(self):
        out = normalize_records([rec(1, "FR", REF + days(3))], REF)
        assert out.records[0].interval is None
        assert out.intervals_for(SCHENGEN_POOL) == []

    def test_future_closed_stay_kept(self):
        out = normalize_records([rec(1, "FR", REF + days(3), REF + days(5))], REF)
        assert out.records[0].interval.days == 3

    def test_string_and_datetime_dates(self):
        out = normalize_records(
            [rec(1, "de", "2024-01-01", "2024-01-10"), rec(2, "FR", datetime(2024, 2, 1, 15, 30), None)],
            date(2024, 2, 2),
        )
        assert out.records[0].interval == DayInterval(date(2024, 1, 1), date(2024, 1, 10))
        assert out.records[0].jurisdiction == SCHENGEN
        assert out.records[1].interval == DayInterval(date(2024, 2, 1), date(2024, 2, 2))


class TestValidation:

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError) as exc:
            normalize_records([rec("bad", "FR", date(2024, 3, 10), date(2024, 3, 1))], REF)
        assert exc.value.record_id == "bad"
        assert exc.value.field == "exit_date"

    def test_malformed_date_rejected(self):
        with pytest.raises(ValidationError) as exc:
            normalize_records([rec("bad", "FR", "2024-13-45")], REF)
        assert exc.value.field == "entry_date"

    def test_missing_country_rejected(self):
        with pytest.raises(ValidationError):
            normalize_records([rec(1, "  ", REF)], REF)

    def test_batch_tolerant_skips_bad_records(self):
        out = normalize_records(
            [rec(1, "FR", REF - days(2), REF), rec(2, "FR", REF, REF - days(1)), rec(3, "ES", "not a date")],
            REF,
            strict=False,
        )
        assert [r.record.id for r in out.records] == ["1"]
        assert out.rejected_record_ids == ("2", "3")

    def test_single_day_interval_ok(self):
        assert DayInterval(REF, REF).days == 1

    def test_interval_of_length(self):
        assert DayInterval.of_length(REF, 10).end == REF + days(9)
        with pytest.raises(ValidationError):
            DayInterval.of_length(REF, 0)


class TestJurisdictionTagging:

    def test_unclassified_kept_but_not_pooled(self):
        out = normalize_records([rec(1, "TH", REF - days(5)), rec(2, "IT", REF - days(5))], REF)
        assert out.unclassified_record_ids == ("1",)
        assert len(out.records) == 2
        assert out.intervals_for(SCHENGEN_POOL) == [DayInterval(REF - days(5), REF)]

    def test_membership_versions(self):
        old = JurisdictionTable.default("2023-01").get(SCHENGEN)
        new = JurisdictionTable.default().get(SCHENGEN)
        assert len(old.members) == 27
        assert len(new.members) == 29
        assert "RO" in new and "RO" not in old
        assert "GB" not in new

    def test_unknown_version(self):
        with pytest.raises(ValidationError):
            JurisdictionTable.default("1999-01")
