"""
Shared pytest fixtures for the jwt-guard test suite.

Provides a frozen clock, reference keys, a strict default policy and a
factory for claim sets padded with realistic custom claims.

Key SDET Concepts Demonstrated:
- Session-scoped fixtures for expensive key material
- Factory fixture pattern (``claims_factory``) for flexible test data
- A caller-supplied clock so time-based tests are deterministic
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from faker import Faker

from jwt_guard import KeyMaterial, VerificationPolicy
from shared.test_helpers import (
    FIXED_NOW,
    TEST_AUDIENCE,
    TEST_ISSUER,
    standard_claims,
    verification_key_for,
)

fake = Faker()


@pytest.fixture
def now() -> int:
    """The verifier's clock for every test: a fixed Unix timestamp."""
    return FIXED_NOW


@pytest.fixture(scope="session")
def rsa_key() -> KeyMaterial:
    """Public half of the session RSA test key."""
    return verification_key_for("RS256")


@pytest.fixture(scope="session")
def hmac_key() -> KeyMaterial:
    """Shared HMAC test secret."""
    return verification_key_for("HS256")


@pytest.fixture
def policy() -> VerificationPolicy:
    """
    Strict RS256-only policy with zero clock skew.

    Zero skew keeps boundary assertions exact; tests that exercise the
    tolerance build their own policy.
    """
    return VerificationPolicy(
        allowed_algorithms={"RS256"},
        expected_issuer=TEST_ISSUER,
        expected_audience=TEST_AUDIENCE,
        clock_skew_tolerance=0,
    )


@pytest.fixture
def claims_factory() -> Callable[..., dict[str, Any]]:
    """
    Factory fixture returning valid claim sets with custom claims.

    Returns a callable ``_make_claims(**overrides)``; passing ``None`` for
    a claim removes it.
    """

    def _make_claims(**overrides: Any) -> dict[str, Any]:
        claims = standard_claims(
            name=fake.name(),
            email=fake.email(),
            roles=["reader", "writer"],
            tenant={"id": fake.uuid4(), "region": "eu-west-1"},
        )
        claims.update(overrides)
        return {name: value for name, value in claims.items() if value is not None}

    return _make_claims
