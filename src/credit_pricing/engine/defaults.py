"""
Built-in credit pricing definitions.

Credit usage is initially restricted to the device:microservices feature.
"""
from datetime import datetime, timezone
from types import MappingProxyType

from .models import CreditDefinition

CREDITS = MappingProxyType({
    'device:microservices': (
        CreditDefinition(
            version=1,
            valid_from=datetime(2023, 1, 1, tzinfo=timezone.utc),
            first_discount_price_cents=149,
            discount_rate=0.33,
            discount_threshold=12000,
            discount_threshold_price_cents=125,
        ),
        CreditDefinition(
            version=2,
            valid_from=datetime(2025, 3, 1, tzinfo=timezone.utc),
            first_discount_price_cents=159,
            discount_rate=0.33,
            discount_threshold=12000,
            discount_threshold_price_cents=133,
        ),
    ),
})
