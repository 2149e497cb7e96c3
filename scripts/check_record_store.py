"""Check the Airtable connection and list the columns of the first record."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Robust import: works with `python -m scripts.check_record_store` AND `python scripts/check_record_store.py`
try:
    from climbcoach.config import load_settings
except ModuleNotFoundError:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
    from climbcoach.config import load_settings

from climbcoach.engine.field_mapping import load_field_mapping
from climbcoach.services.record_store import AirtableRecordStore, RecordStoreError


def main() -> int:
    ap = argparse.ArgumentParser(description="Test the record store connection and show available columns.")
    ap.add_argument("--env-file", default=None, help="Path to a .env file (default: search upwards from cwd)")
    args = ap.parse_args()

    settings = load_settings(args.env_file)
    print(f"API Key: {'Present' if settings.airtable_api_key else 'Missing'}")
    print(f"Base ID: {'Present' if settings.airtable_base_id else 'Missing'}")
    if not settings.record_store_configured:
        print("Missing AIRTABLE_API_KEY / AIRTABLE_BASE_ID.", file=sys.stderr)
        return 1

    mapping = load_field_mapping(settings.field_mapping_version)
    try:
        store = AirtableRecordStore(
            api_key=settings.airtable_api_key,
            base_id=settings.airtable_base_id,
            table=settings.airtable_table,
            endpoint=settings.airtable_endpoint,
            mapping=mapping,
        )
        records = store.fetch_all_raw()
    except RecordStoreError as e:
        print(f"Error connecting to record store: {e}", file=sys.stderr)
        return 2

    print(f"Connected. Found {len(records)} record(s).")
    if records:
        known = {alias for spec in mapping.fields for alias in spec.aliases}
        known |= {alias for spec in mapping.fields for _, aliases in spec.members for alias in aliases}
        print("\nAvailable fields:")
        for name, value in sorted(records[0].get("fields", {}).items()):
            marker = "" if name in known else "  (unmapped)"
            print(f"- {name}: {type(value).__name__}{marker}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
