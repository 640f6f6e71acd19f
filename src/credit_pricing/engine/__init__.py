"""Engine subpackage - credit curve evaluation and definition selection."""
from .pricing_engine import CreditPricing
from .defaults import CREDITS
from .models import CreditDefinition, QuantityRange, Quote
from .selector import DefinitionSelector
from .targets import CurrentTarget, DateTarget, LatestTarget, VersionTarget, parse_target
from .errors import (
    CurveInversionError,
    DuplicateDefinitionError,
    FeatureNotPricedError,
    InvalidInputError,
    InvalidParametersError,
    QuantityOverflowError,
    UnknownFeatureError,
)

__all__ = [
    'CreditPricing', 'CREDITS', 'CreditDefinition', 'QuantityRange', 'Quote',
    'DefinitionSelector', 'CurrentTarget', 'DateTarget', 'LatestTarget',
    'VersionTarget', 'parse_target', 'CurveInversionError',
    'DuplicateDefinitionError', 'FeatureNotPricedError', 'InvalidInputError',
    'InvalidParametersError', 'QuantityOverflowError', 'UnknownFeatureError',
]
