"""
Configuration Classes for token verification.

Centralises the environment-dependent verification settings (trusted
algorithms, issuer, audience, clock skew, keys) into a hierarchy of
configuration classes.  The base ``Config`` class defines development
defaults and subclasses override only what differs per environment.
``policy_from_config`` turns any of them into a ``VerificationPolicy``.

Key Concepts Demonstrated:
- Class-based configuration with inheritance
- Environment-variable overrides for twelve-factor app compliance
- Loading PEM keys from inline env content or from a file path
"""

from __future__ import annotations

import os
from pathlib import Path

from .keys import KeyMaterial
from .policy import VerificationPolicy


def _env_list(name: str, default: str = "") -> list[str]:
    """Split a comma-separated env variable into trimmed, non-empty items."""
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _load_key(raw_env_var: str, path_env_var: str) -> str:
    """Load a PEM key from direct env content or from a path env variable."""
    raw_key = os.environ.get(raw_env_var, "").strip()
    if raw_key:
        return raw_key

    key_path = os.environ.get(path_env_var, "").strip()
    if key_path:
        try:
            return Path(key_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT key file at '{key_path}' from {path_env_var}."
            ) from exc

    raise RuntimeError(
        f"Missing JWT key configuration: set {raw_env_var} or {path_env_var}."
    )


def _has_key_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one key source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def load_verification_key(*, testing: bool = False) -> KeyMaterial:
    """
    Resolve the verification key for the selected environment.

    ``JWT_SECRET_KEY`` selects an HMAC secret; otherwise a PEM public key
    is read from ``JWT_PUBLIC_KEY`` or ``JWT_PUBLIC_KEY_PATH``.  When
    ``testing`` is set, the ``TEST_``-prefixed variables win if present.

    Raises:
        RuntimeError: If no key source is configured or the file is unreadable.
    """
    prefixes = ("TEST_", "") if testing else ("",)
    for prefix in prefixes:
        secret = os.environ.get(f"{prefix}JWT_SECRET_KEY", "").strip()
        if secret:
            return KeyMaterial.symmetric(secret)
        if _has_key_source(f"{prefix}JWT_PUBLIC_KEY", f"{prefix}JWT_PUBLIC_KEY_PATH"):
            pem = _load_key(f"{prefix}JWT_PUBLIC_KEY", f"{prefix}JWT_PUBLIC_KEY_PATH")
            return KeyMaterial.from_pem(pem)
    return KeyMaterial.from_pem(_load_key("JWT_PUBLIC_KEY", "JWT_PUBLIC_KEY_PATH"))


class Config:
    """
    Base configuration with development-safe defaults.

    Attributes:
        JWT_ALLOWED_ALGORITHMS: Algorithms the service trusts.
        JWT_ISSUER: Expected ``iss`` claim, or ``None`` to skip the check.
        JWT_AUDIENCE: Accepted audiences; empty skips the check.
        JWT_SUBJECT: Expected ``sub`` claim, or ``None``.
        JWT_CLOCK_SKEW_SECONDS: Allowed clock drift (in seconds) when
            validating ``exp`` / ``nbf`` / ``iat``.
        JWT_REQUIRE_EXP: Reject tokens without an ``exp`` claim.
        JWT_REQUIRED_CLAIMS: Additional claims every token must carry.
    """

    JWT_ALLOWED_ALGORITHMS: list[str] = _env_list("JWT_ALLOWED_ALGORITHMS", "RS256")
    JWT_ISSUER: str | None = os.environ.get("JWT_ISSUER") or None
    JWT_AUDIENCE: list[str] = _env_list("JWT_AUDIENCE")
    JWT_SUBJECT: str | None = os.environ.get("JWT_SUBJECT") or None

    # Tolerate minor clock differences between issuer and verifier.
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "30"))
    JWT_REQUIRE_EXP: bool = _env_bool("JWT_REQUIRE_EXP", True)
    JWT_REQUIRED_CLAIMS: list[str] = _env_list("JWT_REQUIRED_CLAIMS")

    TESTING: bool = False


class DevelopmentConfig(Config):
    """Development environment configuration; inherits every default."""

    TESTING: bool = False


class TestingConfig(Config):
    """
    Testing environment configuration.

    Uses zero clock skew so boundary tests are exact, and reads keys from
    the ``TEST_``-prefixed variables first.
    """

    __test__ = False  # not a pytest test class

    TESTING: bool = True
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("TEST_JWT_CLOCK_SKEW_SECONDS", "0"))


class ProductionConfig(Config):
    """
    Production environment configuration.

    All trust settings should be supplied exclusively through environment
    variables in production.
    """

    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Look up and return the configuration class for the given environment.

    Args:
        env: Environment name (``"development"``, ``"testing"``,
            ``"production"``).  When ``None``, falls back to the
            ``JWT_GUARD_ENV`` environment variable, defaulting to
            ``"development"``.

    Returns:
        The configuration class (not an instance) for the environment.
    """
    if env is None:
        env = os.environ.get("JWT_GUARD_ENV", "development")
    return config.get(env, config["default"])


def policy_from_config(config_class: type[Config] | Config) -> VerificationPolicy:
    """Build a ``VerificationPolicy`` from a configuration class or instance."""
    return VerificationPolicy(
        allowed_algorithms=config_class.JWT_ALLOWED_ALGORITHMS,
        expected_issuer=config_class.JWT_ISSUER,
        expected_audience=config_class.JWT_AUDIENCE or None,
        clock_skew_tolerance=config_class.JWT_CLOCK_SKEW_SECONDS,
        require_expiration=config_class.JWT_REQUIRE_EXP,
        expected_subject=config_class.JWT_SUBJECT,
        required_claims=config_class.JWT_REQUIRED_CLAIMS,
    )
