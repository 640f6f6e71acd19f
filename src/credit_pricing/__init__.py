"""
Credit Pricing Package

Tiered, volume-discounted unit pricing for credits, versioned over time.
Resolves the active definition per feature and prices purchases along a
linear-then-asymptotic discount curve.
"""

__version__ = "2.0.0"

from .engine import (
    CREDITS,
    CreditDefinition,
    CreditPricing,
    CurveInversionError,
    DuplicateDefinitionError,
    FeatureNotPricedError,
    InvalidInputError,
    InvalidParametersError,
    QuantityOverflowError,
    QuantityRange,
    Quote,
    UnknownFeatureError,
)

__all__ = [
    'CREDITS',
    'CreditDefinition',
    'CreditPricing',
    'CurveInversionError',
    'DuplicateDefinitionError',
    'FeatureNotPricedError',
    'InvalidInputError',
    'InvalidParametersError',
    'QuantityOverflowError',
    'QuantityRange',
    'Quote',
    'UnknownFeatureError',
]
