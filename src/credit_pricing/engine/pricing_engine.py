"""
Credit Pricing Engine - unit prices, totals and savings for credit purchases.

Every operation resolves the active definition once, validates the credit
amounts, and evaluates the pricing curve on that definition:
1. Validate credit amounts (integers, held >= 0, purchase > 0)
2. Resolve the feature's active definition through the selector
3. Evaluate the curve for held + purchased credits
4. Derive totals, discounts and savings from the rounded unit price
"""
import logging
import numbers
from datetime import datetime
from typing import Optional

from .curve import quantity_range, round_half_up, unit_price_cents
from .defaults import CREDITS
from .errors import FeatureNotPricedError, InvalidInputError
from .models import CreditDefinition, QuantityRange, Quote
from .selector import DefinitionSet, DefinitionSelector

logger = logging.getLogger(__name__)


def _require_integer(value, message: str) -> int:
    """Return `value` as an int, rejecting anything with a fractional part."""
    if isinstance(value, bool):
        raise InvalidInputError(message)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)
    raise InvalidInputError(message)


class CreditPricing:
    """
    Credit pricing calculator bound to a definition set and selector target.

    Args:
        credits: Feature slug -> credit definitions (defaults to CREDITS)
        target: 'current' (default), 'latest', a version number or a datetime

    Raises:
        DuplicateDefinitionError: If a feature repeats a version or valid_from
    """

    def __init__(self, credits: Optional[DefinitionSet] = None, target=None):
        self.selector = DefinitionSelector(CREDITS if credits is None else credits, target)
        logger.info(
            f"Credit pricing ready for {len(self.selector.features())} feature(s), "
            f"target {self.selector.target.describe()}"
        )

    @classmethod
    def from_settings(cls, settings=None) -> 'CreditPricing':
        """Build an engine from settings, loading definitions from CSV if configured."""
        from ..config.settings import get_settings
        from ..data.definitions import load_definitions_csv

        settings = settings or get_settings()
        credits = None
        if settings.definitions_csv is not None:
            credits = load_definitions_csv(settings.definitions_csv)
        return cls(credits=credits, target=settings.target)

    @property
    def credits(self):
        """The engine's definition set, each feature sorted newest first."""
        return self.selector.credits

    @property
    def target(self):
        return self.selector.target

    def resolve(self, feature_slug: str, now: Optional[datetime] = None) -> Optional[CreditDefinition]:
        """Active definition for a feature, or None if none matches the target."""
        return self.selector.resolve(feature_slug, now)

    def _get_definition(self, feature_slug: str, now: Optional[datetime] = None) -> CreditDefinition:
        definition = self.resolve(feature_slug, now)
        if definition is None:
            raise FeatureNotPricedError(feature_slug)
        return definition

    def _price(self, feature_slug: str, available_credits, credits_to_purchase, now=None):
        available = _require_integer(available_credits, "Credit amounts must be integers")
        purchase = _require_integer(credits_to_purchase, "Credit amounts must be integers")
        if available < 0:
            raise InvalidInputError("Available credits must be greater than or equal to 0")
        if purchase <= 0:
            raise InvalidInputError("Credit purchase amount must be greater than 0")

        definition = self._get_definition(feature_slug, now)
        price = unit_price_cents(definition, available + purchase)
        return definition, available, purchase, price

    def unit_price(self, feature_slug: str, available_credits, credits_to_purchase) -> int:
        """
        Calculate the unit price of a credit purchase.

        Args:
            feature_slug: Feature slug
            available_credits: Total of available and currently accrued credits
            credits_to_purchase: Number of credits to purchase

        Returns:
            Price of one credit in cents

        Raises:
            InvalidInputError: On fractional or out of range credit amounts
            FeatureNotPricedError: If no definition applies to the feature
            QuantityOverflowError: If the quantity is beyond the priced range
        """
        _, _, _, price = self._price(feature_slug, available_credits, credits_to_purchase)
        return price

    def total_price(self, feature_slug: str, available_credits, credits_to_purchase) -> int:
        """Total price in cents of a credit purchase."""
        _, _, purchase, price = self._price(feature_slug, available_credits, credits_to_purchase)
        return round_half_up(price * purchase)

    def discount_over_dynamic(
        self,
        feature_slug: str,
        available_credits,
        credits_to_purchase,
        dynamic_price_cents: float,
    ) -> int:
        """
        Discount percentage of the credit unit price compared to dynamic pricing.

        Negative when credits cost more than the dynamic price. The dynamic
        price itself must be positive: zero and negative reference prices
        raise InvalidInputError.
        """
        _, _, _, price = self._price(feature_slug, available_credits, credits_to_purchase)
        _check_dynamic_price(dynamic_price_cents)
        return round_half_up((dynamic_price_cents - price) / dynamic_price_cents * 100)

    def total_savings(
        self,
        feature_slug: str,
        available_credits,
        credits_to_purchase,
        dynamic_price_cents: float,
    ) -> int:
        """Savings in cents over a positive dynamic price; may be negative."""
        _, _, purchase, price = self._price(feature_slug, available_credits, credits_to_purchase)
        _check_dynamic_price(dynamic_price_cents)
        return round_half_up(purchase * (dynamic_price_cents - price))

    def quantity_range_for_unit_price(self, feature_slug: str, target_unit_cost_cents) -> QuantityRange:
        """
        Credit quantities (held + purchased) that produce a given unit price.

        Args:
            feature_slug: Feature slug
            target_unit_cost_cents: Desired unit price in cents

        Returns:
            QuantityRange; `from` is None at the first credit price and `to`
            is None at one cent

        Raises:
            InvalidInputError: If the price is not a positive integer, is above
                the first credit price, or is skipped by the curve
            FeatureNotPricedError: If no definition applies to the feature
        """
        target = _require_integer(target_unit_cost_cents, "Unit price must be an integer number of cents")
        if target <= 0:
            raise InvalidInputError("Unit price must be greater than 0")

        definition = self._get_definition(feature_slug)
        if target > definition.first_discount_price_cents:
            raise InvalidInputError(
                f"Unit price cannot exceed {definition.first_discount_price_cents} cents"
            )
        return quantity_range(definition, target)

    def quote(
        self,
        feature_slug: str,
        available_credits,
        credits_to_purchase,
        dynamic_price_cents: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> Quote:
        """
        Price a credit purchase with full traceability.

        Everything in the quote derives from a single definition resolution,
        so all figures agree even when a new version takes effect mid-call.
        """
        definition, available, purchase, price = self._price(
            feature_slug, available_credits, credits_to_purchase, now
        )
        if dynamic_price_cents is not None:
            _check_dynamic_price(dynamic_price_cents)

        result = Quote(
            feature_slug=feature_slug,
            version=definition.version,
            held_quantity=available,
            purchase_quantity=purchase,
            unit_price_cents=price,
            total_price_cents=round_half_up(price * purchase),
        )
        result.add_trace("Definition", f"Resolved {self.target.describe()} definition", f"version {definition.version}")
        result.add_trace("Quantity", f"{available} held + {purchase} purchased", str(available + purchase))
        segment = "linear" if available + purchase <= definition.discount_threshold else "bulk discount"
        result.add_trace("Unit Price", f"Using {segment} segment", f"{price}¢")
        result.add_trace("Extension", f"Quantity {purchase} × {price}¢", f"{result.total_price_cents}¢")

        if dynamic_price_cents is not None:
            result.dynamic_price_cents = dynamic_price_cents
            result.discount_percent = round_half_up((dynamic_price_cents - price) / dynamic_price_cents * 100)
            result.total_savings_cents = round_half_up(purchase * (dynamic_price_cents - price))
            result.add_trace("Discount", f"Compared to dynamic price {dynamic_price_cents}¢", f"{result.discount_percent}%")
            result.add_trace("Savings", "Total savings over dynamic pricing", f"{result.total_savings_cents}¢")

        return result


def _check_dynamic_price(dynamic_price_cents):
    """Reject non-numeric, zero and negative reference prices."""
    if isinstance(dynamic_price_cents, bool) or not isinstance(dynamic_price_cents, numbers.Real):
        raise InvalidInputError("Dynamic price must be a number of cents")
    if dynamic_price_cents <= 0:
        raise InvalidInputError("Dynamic price must be greater than 0")
