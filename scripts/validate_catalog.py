#!/usr/bin/env python3
"""
Catalog validation script for Gym Sync.

Validates gym catalog JSON files before a sync and checks for issues the
record validator cannot see on its own, such as duplicate ids.

Usage:
    python scripts/validate_catalog.py                 # built-in catalog
    python scripts/validate_catalog.py gyms.json ...   # catalog files
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from gymsync.catalog import default_catalog, load_catalog  # noqa: E402
from gymsync.errors import CatalogError  # noqa: E402
from gymsync.validator import validate_record  # noqa: E402


def validate_records(records: list[dict], source: str) -> tuple[list[str], list[str]]:
    """Validate catalog records; returns (errors, warnings)."""
    errors = []
    warnings = []

    seen_ids = set()
    for i, record in enumerate(records):
        result = validate_record(record)
        for message in result.errors:
            errors.append(f"{source}[{i}]: {message}")

        gym_id = record.get("id")
        if gym_id is not None:
            if gym_id in seen_ids:
                errors.append(f"{source}[{i}]: Duplicate id '{gym_id}'")
            seen_ids.add(gym_id)

        address = record.get("address")
        if isinstance(address, dict):
            if address.get("latitude") is None or address.get("longitude") is None:
                warnings.append(f"{source}[{i}]: Missing coordinates")

    return errors, warnings


def main(argv: list[str]) -> int:
    """Main validation routine."""
    if argv:
        sources = [(arg, None) for arg in argv]
    else:
        sources = [("<built-in catalog>", default_catalog())]

    total_errors = 0
    total_warnings = 0
    total_entries = 0

    print("\n" + "=" * 60)
    print("Validating gym catalogs...")
    print("=" * 60 + "\n")

    for name, records in sources:
        print(f"Checking {name}...")

        if records is None:
            try:
                records = load_catalog(name)
            except CatalogError as e:
                print(f"  ✗ {e}")
                total_errors += 1
                continue

        total_entries += len(records)
        print(f"  Entries: {len(records)}")

        errors, warnings = validate_records(records, Path(name).name)
        total_errors += len(errors)
        total_warnings += len(warnings)

        for err in errors[:5]:  # Limit output
            print(f"  ✗ {err}")
        if len(errors) > 5:
            print(f"  ... and {len(errors) - 5} more errors")

        for warn in warnings[:3]:
            print(f"  ! {warn}")

        if not errors:
            print("  ✓ Valid")

    # Summary
    print("\n" + "=" * 60)
    print("Validation Summary")
    print("=" * 60)
    print(f"Total entries: {total_entries}")
    print(f"Errors: {total_errors}")
    print(f"Warnings: {total_warnings}")

    if total_errors > 0:
        print("\n✗ Validation FAILED")
        return 1

    print("\n✓ Validation PASSED")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
