"""Convert text leg-spread values ("1.40 m") to plain numbers in the record store."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Any, Optional

# Robust import: works with `python -m scripts.migrate_leg_spread` AND `python scripts/migrate_leg_spread.py`
try:
    from climbcoach.config import load_settings
except ModuleNotFoundError:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
    from climbcoach.config import load_settings

from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError

LEG_SPREAD_FIELD = "LEG SPREAD"


def parse_leg_spread(value: Any) -> Optional[float]:
    """'1.40 m' -> 1.4. Non-text or unparseable values give None (nothing to migrate)."""
    if not isinstance(value, str):
        return None
    try:
        return float(value.replace("m", "").strip())
    except ValueError:
        return None


def main() -> int:
    ap = argparse.ArgumentParser(description="Rewrite text leg-spread values as numbers.")
    ap.add_argument("--env-file", default=None)
    ap.add_argument("--dry-run", action="store_true", help="Print planned updates without writing")
    ap.add_argument("--delay", type=float, default=0.2, help="Seconds between updates (rate limit)")
    args = ap.parse_args()

    settings = load_settings(args.env_file)
    if not settings.record_store_configured:
        print("Missing required environment variables. Please check your .env file.", file=sys.stderr)
        return 1

    try:
        store = AirtableRecordStore(
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            table=settings.airtable_table,
            endpoint=settings.airtable_endpoint,
        )
        records = store.fetch_all_raw()
        print(f"Found {len(records)} records")

        updated = 0
        for record in records:
            raw = (record.get("fields") or {}).get(LEG_SPREAD_FIELD)
            value = parse_leg_spread(raw)
            if value is None:
                continue
            print(f"Updating record {record['id']}: {raw} -> {value}")
            if not args.dry_run:
                store.update_raw_fields(record["id"], {LEG_SPREAD_FIELD: value})
                time.sleep(args.delay)
            updated += 1
    except RecordStoreError as e:
        print(f"Error updating values: {e}", file=sys.stderr)
        return 2

    print(f"{'Would update' if args.dry_run else 'Updated'} {updated} leg spread value(s).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
