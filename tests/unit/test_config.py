"""
Unit tests for the environment-driven configuration layer.

Key SDET Concepts Demonstrated:
- ``monkeypatch`` for isolated environment variables
- ``tmp_path`` for key files
- Subclassing config classes instead of mutating shared ones
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from jwt_guard import KeyFamily
from jwt_guard.config import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    load_verification_key,
    policy_from_config,
)
from shared.test_helpers import TEST_PUBLIC_KEY

pytestmark = pytest.mark.unit

KEY_VARS = (
    "JWT_SECRET_KEY",
    "JWT_PUBLIC_KEY",
    "JWT_PUBLIC_KEY_PATH",
    "TEST_JWT_SECRET_KEY",
    "TEST_JWT_PUBLIC_KEY",
    "TEST_JWT_PUBLIC_KEY_PATH",
)


@pytest.fixture(autouse=True)
def clean_key_env(monkeypatch):
    """Start every test with no key variables set."""
    for name in KEY_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.parametrize(
    ("env", "expected"),
    [
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_by_name(env, expected):
    assert get_config(env) is expected


def test_get_config_reads_environment(monkeypatch):
    monkeypatch.setenv("JWT_GUARD_ENV", "production")

    assert get_config() is ProductionConfig


def test_policy_from_config_maps_every_setting():
    """Test that each JWT_* setting lands on the matching policy field."""

    # Arrange
    class CustomConfig(Config):
        JWT_ALLOWED_ALGORITHMS = ["ES256", "RS256"]
        JWT_ISSUER = "https://issuer.example.test"
        JWT_AUDIENCE = ["api", "admin"]
        JWT_SUBJECT = "service-account"
        JWT_CLOCK_SKEW_SECONDS = 5
        JWT_REQUIRE_EXP = False
        JWT_REQUIRED_CLAIMS = ["tenant"]

    # Act
    policy = policy_from_config(CustomConfig)

    # Assert
    assert policy.allowed_algorithms == {"ES256", "RS256"}
    assert policy.expected_issuer == "https://issuer.example.test"
    assert policy.expected_audience == {"api", "admin"}
    assert policy.expected_subject == "service-account"
    assert policy.clock_skew_tolerance == timedelta(seconds=5)
    assert policy.require_expiration is False
    assert policy.required_claims == {"tenant"}


def test_empty_audience_setting_disables_the_check():
    class NoAudience(Config):
        JWT_AUDIENCE: list[str] = []

    assert policy_from_config(NoAudience).expected_audience is None


def test_testing_config_uses_zero_skew_by_default():
    assert TestingConfig.TESTING is True
    assert isinstance(TestingConfig.JWT_CLOCK_SKEW_SECONDS, int)


def test_load_key_from_inline_pem(monkeypatch):
    monkeypatch.setenv("JWT_PUBLIC_KEY", TEST_PUBLIC_KEY)

    assert load_verification_key().family is KeyFamily.RSA


def test_load_key_from_path(monkeypatch, tmp_path):
    key_file = tmp_path / "public.pem"
    key_file.write_text(TEST_PUBLIC_KEY, encoding="utf-8")
    monkeypatch.setenv("JWT_PUBLIC_KEY_PATH", str(key_file))

    assert load_verification_key().family is KeyFamily.RSA


def test_secret_takes_precedence_over_public_key(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "shared-secret-for-hmac-tokens")
    monkeypatch.setenv("JWT_PUBLIC_KEY", TEST_PUBLIC_KEY)

    key = load_verification_key()

    assert key.family is KeyFamily.SYMMETRIC
    assert key.value == b"shared-secret-for-hmac-tokens"


def test_testing_variables_win_when_testing(monkeypatch):
    monkeypatch.setenv("JWT_PUBLIC_KEY", TEST_PUBLIC_KEY)
    monkeypatch.setenv("TEST_JWT_SECRET_KEY", "test-only-secret")

    assert load_verification_key(testing=True).family is KeyFamily.SYMMETRIC
    assert load_verification_key(testing=False).family is KeyFamily.RSA


def test_missing_key_configuration_raises():
    with pytest.raises(RuntimeError, match="Missing JWT key configuration"):
        load_verification_key()


def test_unreadable_key_file_raises(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_PUBLIC_KEY_PATH", str(tmp_path / "missing.pem"))

    with pytest.raises(RuntimeError, match="Unable to read JWT key file"):
        load_verification_key()
