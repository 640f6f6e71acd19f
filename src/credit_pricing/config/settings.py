"""
Centralized settings and path configuration for credit pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

DEFAULT_SCHEDULE_QUANTITIES = (
    1, 10, 100, 1000, 12000, 25000, 50000, 100000,
    250000, 500000, 1000000, 2500000, 5000000, 10000000,
)


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Credit pricing settings with sensible defaults."""

    project_root: Path

    # Output files
    schedule_output: Path
    build_report: Path

    # Selector target: current, latest, a version number or an ISO-8601 date.
    # All-digit values are versions, so a date needs at least YYYY-MM-DD.
    target: str = 'current'

    # Optional CSV replacing the built-in definitions
    definitions_csv: Optional[Path] = None

    # Schedule defaults
    feature_slug: str = 'device:microservices'
    dynamic_price_cents: Optional[int] = None
    schedule_quantities: tuple = DEFAULT_SCHEDULE_QUANTITIES

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and CREDIT_PRICING_* variables."""
        root = project_root or get_project_root()

        definitions_csv = os.environ.get('CREDIT_PRICING_DEFINITIONS')
        dynamic_price = os.environ.get('CREDIT_PRICING_DYNAMIC_PRICE_CENTS')

        return cls(
            project_root=root,
            schedule_output=root / 'outputs' / 'price_schedule.csv',
            build_report=root / 'outputs' / 'schedule_report.json',
            target=os.environ.get('CREDIT_PRICING_TARGET', 'current'),
            definitions_csv=Path(definitions_csv) if definitions_csv else None,
            feature_slug=os.environ.get('CREDIT_PRICING_FEATURE', 'device:microservices'),
            dynamic_price_cents=int(dynamic_price) if dynamic_price else None,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
