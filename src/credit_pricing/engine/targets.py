"""
Selector targets - which version of a feature's definitions is active.

Each target variant knows how to pick its definition from a sequence sorted
by valid_from, newest first.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence, Union

from .errors import InvalidInputError
from .models import CreditDefinition, as_utc


def _first_valid_at(definitions: Sequence[CreditDefinition], moment: datetime) -> Optional[CreditDefinition]:
    for definition in definitions:
        if definition.valid_from <= moment:
            return definition
    return None


@dataclass(frozen=True)
class CurrentTarget:
    """Newest definition already in effect at evaluation time."""

    def pick(self, definitions: Sequence[CreditDefinition], now: Optional[datetime] = None) -> Optional[CreditDefinition]:
        moment = as_utc(now) if now is not None else datetime.now(timezone.utc)
        return _first_valid_at(definitions, moment)

    def describe(self) -> str:
        return "current"


@dataclass(frozen=True)
class LatestTarget:
    """Newest definition, whether or not it is in effect yet."""

    def pick(self, definitions: Sequence[CreditDefinition], now: Optional[datetime] = None) -> Optional[CreditDefinition]:
        return definitions[0] if definitions else None

    def describe(self) -> str:
        return "latest"


@dataclass(frozen=True)
class VersionTarget:
    """Exact definition version, regardless of dates."""
    version: int

    def pick(self, definitions: Sequence[CreditDefinition], now: Optional[datetime] = None) -> Optional[CreditDefinition]:
        for definition in definitions:
            if definition.version == self.version:
                return definition
        return None

    def describe(self) -> str:
        return f"version {self.version}"


@dataclass(frozen=True)
class DateTarget:
    """Newest definition in effect at a fixed moment."""
    moment: datetime

    def __post_init__(self):
        object.__setattr__(self, 'moment', as_utc(self.moment))

    def pick(self, definitions: Sequence[CreditDefinition], now: Optional[datetime] = None) -> Optional[CreditDefinition]:
        return _first_valid_at(definitions, self.moment)

    def describe(self) -> str:
        return f"as of {self.moment.isoformat()}"


Target = Union[CurrentTarget, LatestTarget, VersionTarget, DateTarget]

TARGET_TYPES = (CurrentTarget, LatestTarget, VersionTarget, DateTarget)


def parse_target(value=None) -> Target:
    """
    Build a selector target from its public form.

    Accepts None or 'current', 'latest', an integer version, a datetime, or a
    string holding a version number or an ISO-8601 date. An all-digit string
    is always a version: '2024' is version 2024, '2024-01-01' is a date.
    """
    if value is None:
        return CurrentTarget()
    if isinstance(value, TARGET_TYPES):
        return value
    if isinstance(value, datetime):
        return DateTarget(value)
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid credit definition target: {value!r}")
    if isinstance(value, int):
        return VersionTarget(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("", "current"):
            return CurrentTarget()
        if text == "latest":
            return LatestTarget()
        if text.isdigit():
            return VersionTarget(int(text))
        try:
            return DateTarget(datetime.fromisoformat(value.strip()))
        except ValueError:
            pass
    raise InvalidInputError(f"Invalid credit definition target: {value!r}")
