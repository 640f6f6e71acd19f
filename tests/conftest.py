"""
Shared fixtures for the credit pricing tests.
"""
from datetime import datetime, timedelta, timezone

import pytest

from credit_pricing import CreditDefinition, CreditPricing

FEATURE_SLUG = 'foo:bar'
DYNAMIC_PRICE_CENTS = 150

TEST_DEFINITION = CreditDefinition(
    version=1,
    valid_from=datetime(2020, 1, 1, tzinfo=timezone.utc),
    first_discount_price_cents=149,
    discount_rate=0.33,
    discount_threshold=12000,
    discount_threshold_price_cents=125,
)

TEST_CREDITS = {FEATURE_SLUG: [TEST_DEFINITION]}


def make_definition(version: int, valid_from: datetime, first: int = 149, threshold_price: int = 125) -> CreditDefinition:
    return CreditDefinition(
        version=version,
        valid_from=valid_from,
        first_discount_price_cents=first,
        discount_rate=0.33,
        discount_threshold=12000,
        discount_threshold_price_cents=threshold_price,
    )


@pytest.fixture(scope="module")
def pricing():
    """A single engine over the test definition."""
    return CreditPricing(TEST_CREDITS)


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def versioned_credits(now):
    """Three versions of foo:bar: two in effect, one taking effect in an hour."""
    return {
        FEATURE_SLUG: [
            make_definition(1, now - timedelta(hours=2)),
            make_definition(2, now - timedelta(hours=1), first=139, threshold_price=119),
            make_definition(3, now + timedelta(hours=1), first=200, threshold_price=180),
        ]
    }
