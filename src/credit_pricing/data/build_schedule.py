"""
Schedule Builder - Tabulates the credit pricing curve over a quantity grid.

Produces a price schedule CSV and a JSON build report, for publishing price
sheets and checking new definitions before they take effect.
"""
import json
from datetime import datetime, timezone
from typing import Iterable, Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.errors import InvalidParametersError, QuantityOverflowError
from ..engine.pricing_engine import CreditPricing

SCHEDULE_COLUMNS = ['quantity', 'unit_price_cents', 'total_price_cents']
DYNAMIC_COLUMNS = ['discount_percent', 'total_savings_cents']


def build_price_schedule(
    engine: CreditPricing,
    feature_slug: str,
    quantities: Iterable[int],
    held: int = 0,
    dynamic_price_cents: Optional[float] = None,
    now: Optional[datetime] = None,
) -> tuple[pd.DataFrame, list[int]]:
    """
    Price each purchase quantity against one resolved definition.

    Args:
        engine: Pricing engine
        feature_slug: Feature to price
        quantities: Purchase quantities
        held: Credits already held before each purchase
        dynamic_price_cents: Optional reference price for discount columns
        now: Evaluation instant for the current target (defaults to the wall clock)

    Returns:
        (schedule DataFrame, quantities skipped because they overflow the curve)
    """
    now = now or datetime.now(timezone.utc)
    rows = []
    skipped = []

    for qty in sorted(set(quantities)):
        try:
            quote = engine.quote(feature_slug, held, qty, dynamic_price_cents, now=now)
        except QuantityOverflowError:
            skipped.append(qty)
            continue

        row = {
            'quantity': qty,
            'unit_price_cents': quote.unit_price_cents,
            'total_price_cents': quote.total_price_cents,
        }
        if dynamic_price_cents is not None:
            row['discount_percent'] = quote.discount_percent
            row['total_savings_cents'] = quote.total_savings_cents
        rows.append(row)

    columns = SCHEDULE_COLUMNS + (DYNAMIC_COLUMNS if dynamic_price_cents is not None else [])
    return pd.DataFrame(rows, columns=columns), skipped


def export_price_schedule(
    settings: Optional[Settings] = None,
    engine: Optional[CreditPricing] = None,
    verbose: bool = True,
) -> dict:
    """
    Build the price schedule for the configured feature and write it to disk.

    Args:
        settings: Optional settings override
        engine: Optional engine override (defaults to one built from settings)
        verbose: Print progress messages

    Returns:
        Build report dictionary
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "feature_slug": settings.feature_slug,
        "definition_version": None,
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    try:
        engine = engine or CreditPricing.from_settings(settings)
        now = datetime.now(timezone.utc)
        definition = engine.resolve(settings.feature_slug, now)
        if definition is None:
            raise InvalidParametersError(
                f"No {engine.target.describe()} credit definition for {settings.feature_slug}"
            )
        report["definition_version"] = definition.version

        schedule, skipped = build_price_schedule(
            engine,
            settings.feature_slug,
            settings.schedule_quantities,
            dynamic_price_cents=settings.dynamic_price_cents,
            now=now,
        )
    except (InvalidParametersError, FileNotFoundError) as e:
        msg = f"ERROR: Failed to build price schedule. {e}"
        report["errors"].append(msg)
        report["status"] = "failed"
        if verbose:
            print(msg)
        return report

    if skipped:
        report["warnings"].append(
            f"{len(skipped)} quantities exceed the maximum supported amount of credits: {skipped}"
        )

    report["metrics"]["rows"] = len(schedule)
    report["metrics"]["skipped_quantities"] = len(skipped)
    if not schedule.empty:
        report["metrics"]["min_unit_price_cents"] = int(schedule['unit_price_cents'].min())
        report["metrics"]["max_unit_price_cents"] = int(schedule['unit_price_cents'].max())

    if verbose:
        print(f"Priced {len(schedule)} quantities for {settings.feature_slug} "
              f"(definition version {definition.version})")

    output_path = settings.schedule_output
    output_path.parent.mkdir(parents=True, exist_ok=True)
    schedule.to_csv(output_path, index=False)
    report["output_file"] = str(output_path)
    report["status"] = "success"

    if verbose:
        print(f"\nPROCESS COMPLETE: {output_path} generated with {len(schedule)} rows.")

    report_path = settings.build_report
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w') as f:
        json.dump(report, f, indent=2)

    if verbose:
        print(f"Build report saved to: {report_path}")

    return report
