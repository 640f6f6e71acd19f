"""
Data models for the credit pricing engine.

Uses dataclasses for structured, type-safe data representation.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def as_utc(moment: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class CreditDefinition:
    """
    One version of a feature's credit pricing curve.

    The curve only makes sense when discount_threshold_price_cents is below
    first_discount_price_cents and discount_rate lies in (0, 1). Neither is
    checked here.
    """
    version: int
    valid_from: datetime
    first_discount_price_cents: int
    discount_rate: float
    discount_threshold: int
    discount_threshold_price_cents: int

    def __post_init__(self):
        object.__setattr__(self, 'valid_from', as_utc(self.valid_from))

    @property
    def valid_from_key(self) -> str:
        """Canonical UTC ISO-8601 form used to compare instants."""
        return self.valid_from.astimezone(timezone.utc).isoformat()

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "valid_from": self.valid_from.isoformat(),
            "first_discount_price_cents": self.first_discount_price_cents,
            "discount_rate": self.discount_rate,
            "discount_threshold": self.discount_threshold,
            "discount_threshold_price_cents": self.discount_threshold_price_cents,
        }


@dataclass(frozen=True)
class QuantityRange:
    """Quantities (held + purchased) that price at one unit cost, inclusive."""
    from_quantity: Optional[int] = None
    to_quantity: Optional[int] = None

    def to_dict(self) -> dict:
        return {"from": self.from_quantity, "to": self.to_quantity}


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Quote:
    """Complete result of a credit pricing calculation."""
    feature_slug: str
    version: int
    held_quantity: int
    purchase_quantity: int
    unit_price_cents: int
    total_price_cents: int
    dynamic_price_cents: Optional[int] = None
    discount_percent: Optional[int] = None
    total_savings_cents: Optional[int] = None
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the quote trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
