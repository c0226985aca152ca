"""
Print compliance status and ranked alerts for one stored traveler.

Usage (from project root):
  python scripts/check_traveler.py traveler-42
  python scripts/check_traveler.py traveler-42 --date 2024-03-30
  python scripts/check_traveler.py traveler-42 --run-job   # run the full daily job instead
"""
import os
import sys
import argparse
from datetime import date

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from stayguard.config import get_settings
from stayguard.database import SessionLocal
from stayguard.services.compliance import compute_jurisdiction_compliance
from stayguard.services.errors import RangeTooLargeError
from stayguard.services.jurisdictions import SCHENGEN, JurisdictionTable
from stayguard.services.records import get_stay_records
from stayguard.services.rules import ComplianceRules
from stayguard.services.stay_timer import check_traveler, run_compliance_check_job


def main():
    parser = argparse.ArgumentParser(description="Check stay compliance for a stored traveler")
    parser.add_argument("traveler_id", type=str)
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="Reference date (default today)")
    parser.add_argument("--run-job", action="store_true", help="Run the daily job for every traveler")
    args = parser.parse_args()

    ref = args.date or date.today()
    if args.run_job:
        results = run_compliance_check_job(reference_date=ref)
        print(f"Job done: {len(results)} traveler(s) with alerts as of {ref.isoformat()}")
        return

    settings = get_settings()
    rules = ComplianceRules.from_settings(settings)
    table = JurisdictionTable.default(settings.schengen_version or None)
    db = SessionLocal()
    try:
        records = get_stay_records(db, args.traveler_id)
        if not records:
            print(f"NO - No stay records for traveler: {args.traveler_id}")
            return
        try:
            result = compute_jurisdiction_compliance(records, SCHENGEN, ref, rules=rules, table=table, strict=False)
        except RangeTooLargeError as e:
            print(f"{args.traveler_id}: Schengen check skipped: {e}")
        else:
            print(
                f"{args.traveler_id} as of {ref.isoformat()}: used={result.used_days} "
                f"remaining={result.remaining_days} compliant={result.is_compliant} "
                f"next_reset={result.next_reset_date}"
            )
        for alert in check_traveler(db, args.traveler_id, ref, rules=rules, table=table):
            print(f"  [{alert.severity.value}] {alert.title}: {alert.body}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
