"""
Definition Selector - Resolves the active credit definition for a feature.

Definitions are kept per feature, newest valid_from first. Which one is
active depends on the selector target:
1. current: newest definition already in effect (wall clock)
2. latest: newest definition, even if not in effect yet
3. version: exact version number
4. date: newest definition in effect at a given moment
"""
import logging
from datetime import datetime
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .errors import DuplicateDefinitionError, UnknownFeatureError
from .models import CreditDefinition
from .targets import Target, parse_target

logger = logging.getLogger(__name__)

DefinitionSet = Mapping[str, Iterable[CreditDefinition]]


def sort_definitions(credits: DefinitionSet) -> Mapping[str, tuple[CreditDefinition, ...]]:
    """
    Sort each feature's definitions newest first and check them for duplicates.

    Raises:
        DuplicateDefinitionError: If two definitions of one feature share a
            version or a valid_from instant
    """
    ordered = {}
    for feature_slug, definitions in credits.items():
        definitions = tuple(sorted(definitions, key=lambda d: d.valid_from, reverse=True))

        versions = set()
        instants = set()
        for definition in definitions:
            if definition.version in versions:
                raise DuplicateDefinitionError(feature_slug, "version", definition.version)
            versions.add(definition.version)

            key = definition.valid_from_key
            if key in instants:
                raise DuplicateDefinitionError(feature_slug, "valid_from", key)
            instants.add(key)

        ordered[feature_slug] = definitions
    return MappingProxyType(ordered)


class DefinitionSelector:
    """
    Picks one credit definition per feature according to a fixed target.

    The definition set and target are frozen at construction.
    """

    def __init__(self, credits: DefinitionSet, target=None):
        definitions = sort_definitions(credits)
        target = parse_target(target)

        self._definitions = definitions
        self._target = target

    @property
    def target(self) -> Target:
        return self._target

    @property
    def credits(self) -> Mapping[str, tuple[CreditDefinition, ...]]:
        return self._definitions

    def features(self) -> list[str]:
        """Feature slugs that have definitions."""
        return list(self._definitions.keys())

    def definitions(self, feature_slug: str) -> tuple[CreditDefinition, ...]:
        """All definitions of a feature, newest first."""
        try:
            return self._definitions[feature_slug]
        except KeyError:
            raise UnknownFeatureError(feature_slug) from None

    def resolve(self, feature_slug: str, now: Optional[datetime] = None) -> Optional[CreditDefinition]:
        """
        Resolve the active definition for a feature.

        Args:
            feature_slug: Feature identifier
            now: Evaluation instant for the current target (defaults to the
                wall clock)

        Returns:
            The active definition, or None when no definition matches the target

        Raises:
            UnknownFeatureError: If the feature has no definitions at all
        """
        definition = self._target.pick(self.definitions(feature_slug), now)
        if definition is None:
            logger.debug("No credit definition for %s (%s)", feature_slug, self._target.describe())
        else:
            logger.debug(
                "Resolved %s to version %s (%s)", feature_slug, definition.version, self._target.describe()
            )
        return definition
