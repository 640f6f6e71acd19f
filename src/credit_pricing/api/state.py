"""
Shared engine instance for the API.
"""
from ..engine.pricing_engine import CreditPricing

engine = CreditPricing.from_settings()
