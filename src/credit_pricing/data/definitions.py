"""
Definition Loader - Reads credit pricing definitions from CSV.

Expected columns:
    feature_slug, version, valid_from, first_discount_price_cents,
    discount_rate, discount_threshold, discount_threshold_price_cents

Duplicate versions and instants are left for the selector to reject.
"""
import logging
from pathlib import Path

import pandas as pd

from ..engine.errors import InvalidInputError
from ..engine.models import CreditDefinition

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    'feature_slug',
    'version',
    'valid_from',
    'first_discount_price_cents',
    'discount_rate',
    'discount_threshold',
    'discount_threshold_price_cents',
]


INTEGER_COLUMNS = [
    'version',
    'first_discount_price_cents',
    'discount_threshold',
    'discount_threshold_price_cents',
]


def definitions_from_frame(df: pd.DataFrame) -> dict[str, list[CreditDefinition]]:
    """
    Convert a definitions table into a feature slug -> definitions mapping.

    Rows with missing values, unparseable dates or non-numeric prices are
    skipped with a warning.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise InvalidInputError(f"Credit definitions are missing columns: {', '.join(missing)}")

    df = df[REQUIRED_COLUMNS].copy()

    incomplete = df.isna().any(axis=1)
    if incomplete.any():
        logger.warning(f"Skipping {int(incomplete.sum())} incomplete credit definition row(s)")
        df = df[~incomplete].copy()

    df['feature_slug'] = df['feature_slug'].astype(str).str.strip()
    df['valid_from'] = pd.to_datetime(df['valid_from'], utc=True, format='ISO8601', errors='coerce')
    for col in INTEGER_COLUMNS + ['discount_rate']:
        df[col] = pd.to_numeric(df[col], errors='coerce')

    malformed = df.isna().any(axis=1) | ~(df[INTEGER_COLUMNS] % 1 == 0).all(axis=1)
    if malformed.any():
        logger.warning(f"Skipping {int(malformed.sum())} malformed credit definition row(s)")
        df = df[~malformed].copy()

    credits: dict[str, list[CreditDefinition]] = {}
    for row in df.itertuples(index=False):
        credits.setdefault(row.feature_slug, []).append(CreditDefinition(
            version=int(row.version),
            valid_from=row.valid_from.to_pydatetime(),
            first_discount_price_cents=int(row.first_discount_price_cents),
            discount_rate=float(row.discount_rate),
            discount_threshold=int(row.discount_threshold),
            discount_threshold_price_cents=int(row.discount_threshold_price_cents),
        ))
    return credits


def load_definitions_csv(path: Path) -> dict[str, list[CreditDefinition]]:
    """
    Load credit definitions from a CSV file.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidInputError: If required columns are missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Credit definitions file not found at {path}.")

    df = pd.read_csv(path, dtype={'feature_slug': str})
    credits = definitions_from_frame(df)
    logger.info(f"Loaded {sum(len(d) for d in credits.values())} credit definition(s) from {path}")
    return credits
