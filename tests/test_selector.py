"""
Definition selector tests - version ordering, validation and targets.
"""
from datetime import datetime, timedelta, timezone

import pytest

from credit_pricing import CreditPricing, DuplicateDefinitionError, InvalidInputError, UnknownFeatureError
from credit_pricing.engine import (
    CurrentTarget,
    DateTarget,
    DefinitionSelector,
    LatestTarget,
    VersionTarget,
    parse_target,
)
from conftest import FEATURE_SLUG, make_definition


def _version(engine, now=None):
    definition = engine.resolve(FEATURE_SLUG, now)
    return definition.version if definition else None


def test_current_target_resolves_newest_definition_in_effect(versioned_credits):
    assert _version(CreditPricing(versioned_credits, target='current')) == 2


def test_default_target_is_current(versioned_credits):
    engine = CreditPricing(versioned_credits)
    assert isinstance(engine.target, CurrentTarget)
    assert _version(engine) == 2


def test_latest_target_ignores_valid_from(versioned_credits):
    assert _version(CreditPricing(versioned_credits, target='latest')) == 3


def test_version_target_resolves_exact_version(versioned_credits):
    assert _version(CreditPricing(versioned_credits, target=1)) == 1
    assert _version(CreditPricing(versioned_credits, target=3)) == 3


def test_version_target_without_match_resolves_nothing(versioned_credits):
    assert CreditPricing(versioned_credits, target=7).resolve(FEATURE_SLUG) is None


def test_date_target_resolves_definition_in_effect(versioned_credits, now):
    assert _version(CreditPricing(versioned_credits, target=now)) == 2
    assert _version(CreditPricing(versioned_credits, target=now + timedelta(hours=24))) == 3
    assert _version(CreditPricing(versioned_credits, target=now - timedelta(minutes=90))) == 1


def test_date_target_before_first_definition_resolves_nothing(versioned_credits, now):
    engine = CreditPricing(versioned_credits, target=now - timedelta(days=1))
    assert engine.resolve(FEATURE_SLUG) is None


def test_current_target_includes_definition_valid_exactly_now(versioned_credits, now):
    """A definition takes effect at its valid_from instant, not after it."""
    engine = CreditPricing(versioned_credits)
    takes_effect = now + timedelta(hours=1)

    assert _version(engine, takes_effect - timedelta(microseconds=1)) == 2
    assert _version(engine, takes_effect) == 3


def test_current_target_follows_the_clock(versioned_credits, now):
    engine = CreditPricing(versioned_credits)
    assert _version(engine, now + timedelta(hours=2)) == 3
    assert _version(engine, now - timedelta(hours=3)) is None


def test_latest_target_prices_can_exceed_dynamic_price(versioned_credits):
    """The newest version here costs more than the reference price."""
    engine = CreditPricing(versioned_credits, target='latest')

    assert engine.unit_price(FEATURE_SLUG, 0, 1) == 200
    assert engine.discount_over_dynamic(FEATURE_SLUG, 0, 1, 150) == -33
    assert engine.total_savings(FEATURE_SLUG, 0, 1, 150) == -50


def test_definitions_are_sorted_newest_first(versioned_credits):
    engine = CreditPricing(versioned_credits)
    versions = [d.version for d in engine.credits[FEATURE_SLUG]]
    assert versions == [3, 2, 1]


def test_duplicate_version_is_rejected(now):
    credits = {
        FEATURE_SLUG: [
            make_definition(1, now - timedelta(hours=2)),
            make_definition(1, now - timedelta(hours=1)),
        ]
    }

    with pytest.raises(DuplicateDefinitionError) as exc_info:
        CreditPricing(credits)

    assert exc_info.value.feature_slug == FEATURE_SLUG
    assert exc_info.value.field == "version"
    assert exc_info.value.value == 1
    assert FEATURE_SLUG in str(exc_info.value)
    assert "version 1" in str(exc_info.value)


def test_duplicate_valid_from_is_rejected_across_time_zones():
    """The same instant written in two offsets is still a duplicate."""
    utc_noon = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    cet_one = datetime(2024, 1, 1, 13, tzinfo=timezone(timedelta(hours=1)))
    credits = {FEATURE_SLUG: [make_definition(1, utc_noon), make_definition(2, cet_one)]}

    with pytest.raises(DuplicateDefinitionError) as exc_info:
        CreditPricing(credits)

    assert exc_info.value.field == "valid_from"
    assert "2024-01-01T12:00:00+00:00" in str(exc_info.value)


def test_same_version_in_different_features_is_allowed(now):
    credits = {
        'foo:bar': [make_definition(1, now - timedelta(hours=1))],
        'foo:baz': [make_definition(1, now - timedelta(hours=1))],
    }
    engine = CreditPricing(credits)
    assert sorted(engine.selector.features()) == ['foo:bar', 'foo:baz']


def test_naive_valid_from_is_treated_as_utc():
    definition = make_definition(1, datetime(2024, 1, 1, 12))
    assert definition.valid_from == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def test_unknown_feature_raises(versioned_credits):
    selector = DefinitionSelector(versioned_credits)
    with pytest.raises(UnknownFeatureError):
        selector.resolve('nope')


def test_feature_with_no_definitions_resolves_nothing():
    selector = DefinitionSelector({FEATURE_SLUG: []}, target='latest')
    assert selector.resolve(FEATURE_SLUG) is None


@pytest.mark.parametrize("value,expected", [
    (None, CurrentTarget()),
    ('current', CurrentTarget()),
    ('latest', LatestTarget()),
    (' Latest ', LatestTarget()),
    (3, VersionTarget(3)),
    ('3', VersionTarget(3)),
    (LatestTarget(), LatestTarget()),
])
def test_parse_target(value, expected):
    assert parse_target(value) == expected


def test_parse_target_dates():
    moment = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert parse_target(moment) == DateTarget(moment)
    assert parse_target('2024-06-01') == DateTarget(datetime(2024, 6, 1, tzinfo=timezone.utc))


@pytest.mark.parametrize("value", [True, 'bogus', 1.5, []])
def test_parse_target_rejects_unknown_forms(value):
    with pytest.raises(InvalidInputError):
        parse_target(value)


def test_resolution_is_logged_at_debug(versioned_credits, caplog):
    selector = DefinitionSelector(versioned_credits, target='latest')

    with caplog.at_level("DEBUG", logger="credit_pricing.engine.selector"):
        selector.resolve(FEATURE_SLUG)

    record = caplog.records[-1]
    assert record.args == (FEATURE_SLUG, 3, "latest")
    assert record.getMessage() == f"Resolved {FEATURE_SLUG} to version 3 (latest)"
