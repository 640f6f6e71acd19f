"""
Credit pricing curve - unit price as a function of total credits held.

The curve has two segments:
- up to discount_threshold credits the price falls linearly from
  first_discount_price_cents to discount_threshold_price_cents
- past the threshold the price decays by discount_rate for every tenfold
  increase in credits

All prices are whole cents, rounded half up.
"""
import logging
import math
from typing import Callable

from .errors import CurveInversionError, InvalidInputError, QuantityOverflowError
from .models import CreditDefinition, QuantityRange

logger = logging.getLogger(__name__)

# Upper bound on single-credit steps when correcting an inverse estimate
MAX_INVERSION_STEPS = 10_000

# Keeps 10 ** exponent inside float range for very flat curves
_MAX_EXPONENT = 300.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def unit_price_cents(definition: CreditDefinition, total: int) -> int:
    """
    Unit price in cents for a credit when `total` credits are held after purchase.

    Raises:
        QuantityOverflowError: If the price has decayed to zero
    """
    if total == 0:
        return 0

    first = definition.first_discount_price_cents
    threshold = definition.discount_threshold
    threshold_price = definition.discount_threshold_price_cents

    if total <= threshold and threshold > 1:
        slope = (threshold_price - first) / (threshold - 1)
        return round_half_up(first + slope * (total - 1))

    try:
        ratio = total / threshold
    except OverflowError:
        # Beyond float range the ratio is infinite and the price decays to zero
        raise QuantityOverflowError() from None

    price = round_half_up(threshold_price * (1 - definition.discount_rate) ** math.log10(ratio))
    if price <= 0:
        raise QuantityOverflowError()
    return price


def quantity_at_price(definition: CreditDefinition, price: float) -> float:
    """Continuous inverse of the unrounded curve: total credits at which it equals `price`."""
    first = definition.first_discount_price_cents
    threshold = definition.discount_threshold
    threshold_price = definition.discount_threshold_price_cents

    if price >= threshold_price:
        if threshold <= 1 or first == threshold_price:
            return float(threshold)
        return 1 + (price - first) * (threshold - 1) / (threshold_price - first)

    rate = definition.discount_rate
    if not 0 < rate < 1:
        raise CurveInversionError(
            f"Cannot invert credit curve version {definition.version} with discount rate {rate}"
        )
    exponent = math.log(price / threshold_price) / math.log(1 - rate)
    return threshold * 10 ** min(exponent, _MAX_EXPONENT)


def _walk(start: int, should_step: Callable[[int], int], label: str) -> int:
    """Move `start` one credit at a time while `should_step` returns +1 or -1."""
    candidate = max(start, 1)
    for _ in range(MAX_INVERSION_STEPS):
        step = should_step(candidate)
        if step == 0:
            return candidate
        candidate += step
    raise CurveInversionError(
        f"Could not locate the {label} credit quantity within {MAX_INVERSION_STEPS} steps"
    )


def quantity_range(definition: CreditDefinition, target_cents: int) -> QuantityRange:
    """
    Range of total credit quantities whose unit price is exactly `target_cents`.

    `from` is only computed below the first credit price, `to` only above one
    cent. Both start from the closed-form inverse and are corrected against
    unit_price_cents so they match the rounded curve exactly.

    Raises:
        InvalidInputError: If the curve skips `target_cents`
        CurveInversionError: If the correction does not converge
    """
    def price(total: int) -> int:
        return unit_price_cents(definition, total)

    from_quantity = None
    to_quantity = None

    if target_cents < definition.first_discount_price_cents:
        estimate = math.floor(quantity_at_price(definition, target_cents + 0.5)) + 1

        # Smallest total priced at or below the target
        def towards_from(candidate: int) -> int:
            if price(candidate) > target_cents:
                return 1
            if candidate > 1 and price(candidate - 1) <= target_cents:
                return -1
            return 0

        from_quantity = _walk(estimate, towards_from, "minimum")
        logger.debug("Unit price %s: from estimate %s, corrected %s", target_cents, estimate, from_quantity)
        if price(from_quantity) != target_cents:
            raise InvalidInputError(f"No credit quantity is priced at {target_cents} cents")

    if target_cents > 1:
        estimate = math.floor(quantity_at_price(definition, target_cents - 0.5))

        # Largest total priced at or above the target
        def towards_to(candidate: int) -> int:
            if candidate > 1 and price(candidate) < target_cents:
                return -1
            if price(candidate + 1) >= target_cents:
                return 1
            return 0

        to_quantity = _walk(estimate, towards_to, "maximum")
        logger.debug("Unit price %s: to estimate %s, corrected %s", target_cents, estimate, to_quantity)
        if price(to_quantity) != target_cents:
            raise InvalidInputError(f"No credit quantity is priced at {target_cents} cents")

    return QuantityRange(from_quantity=from_quantity, to_quantity=to_quantity)
