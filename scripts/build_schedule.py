#!/usr/bin/env python
"""
Build pipeline - exports the price schedule and runs the pricing tests.

Usage:
    python scripts/build_schedule.py [--skip-tests]
"""
import argparse
import logging
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from credit_pricing.data.build_schedule import export_price_schedule


def main():
    parser = argparse.ArgumentParser(description="Export the credit price schedule")
    parser.add_argument("--skip-tests", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("CREDIT PRICING BUILD PIPELINE")
    print("=" * 60)
    print()

    print("[1/2] Exporting price schedule...")
    report = export_price_schedule(verbose=True)

    if report["status"] != "success":
        print("\n❌ BUILD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    if args.skip_tests:
        print("[2/2] Skipping tests")
    else:
        print("[2/2] Running pricing tests...")
        test_result = subprocess.run(
            [sys.executable, '-m', 'pytest', 'tests', '-q', '--tb=short'],
            cwd=Path(__file__).parent.parent
        )
        if test_result.returncode != 0:
            print("\n❌ TESTS FAILED")
            sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Feature: {report['feature_slug']} (version {report['definition_version']})")
    print(f"  Rows: {report['metrics']['rows']}")
    print(f"  Skipped quantities: {report['metrics']['skipped_quantities']}")
    for warning in report["warnings"]:
        print(f"  WARNING: {warning}")


if __name__ == "__main__":
    main()
