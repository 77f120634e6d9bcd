"""Unit tests for ``VerificationPolicy`` construction and normalisation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from jwt_guard import VerificationPolicy
from jwt_guard.policy import DEFAULT_CLOCK_SKEW

pytestmark = pytest.mark.unit


def test_defaults():
    policy = VerificationPolicy(allowed_algorithms=["RS256"])

    assert policy.allowed_algorithms == frozenset({"RS256"})
    assert policy.expected_issuer is None
    assert policy.expected_audience is None
    assert policy.clock_skew_tolerance == DEFAULT_CLOCK_SKEW == timedelta(seconds=30)
    assert policy.require_expiration is True
    assert policy.required_claims == frozenset()


def test_allowed_algorithms_is_mandatory():
    with pytest.raises(TypeError):
        VerificationPolicy()


@pytest.mark.parametrize("allowed", [[], set(), None])
def test_allowed_algorithms_must_not_be_empty(allowed):
    with pytest.raises(ValueError):
        VerificationPolicy(allowed_algorithms=allowed)


def test_allowed_algorithms_refuses_a_bare_string():
    """Test that "RS256" is not silently treated as the set {'R', 'S', '2', '5', '6'}."""
    with pytest.raises(TypeError):
        VerificationPolicy(allowed_algorithms="RS256")


def test_single_audience_string_becomes_a_set():
    policy = VerificationPolicy(allowed_algorithms=["RS256"], expected_audience="api")

    assert policy.expected_audience == frozenset({"api"})


@pytest.mark.parametrize(("skew", "seconds"), [(0, 0.0), (12, 12.0), (1.5, 1.5), (timedelta(minutes=1), 60.0)])
def test_clock_skew_accepts_numbers_and_timedeltas(skew, seconds):
    policy = VerificationPolicy(allowed_algorithms=["HS256"], clock_skew_tolerance=skew)

    assert policy.skew_seconds == seconds


def test_negative_clock_skew_is_refused():
    with pytest.raises(ValueError):
        VerificationPolicy(allowed_algorithms=["HS256"], clock_skew_tolerance=-1)


@pytest.mark.parametrize("skew", ["30", True, None])
def test_clock_skew_type_is_checked(skew):
    with pytest.raises(TypeError):
        VerificationPolicy(allowed_algorithms=["HS256"], clock_skew_tolerance=skew)


def test_issuer_must_be_a_string():
    with pytest.raises(TypeError):
        VerificationPolicy(allowed_algorithms=["HS256"], expected_issuer=["a"])


def test_policy_is_immutable():
    policy = VerificationPolicy(allowed_algorithms=["HS256"])

    with pytest.raises(AttributeError):
        policy.allowed_algorithms = frozenset({"none"})
