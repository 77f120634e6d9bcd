"""
Claims validation.

Checks the registered time claims (``exp``, ``nbf``, ``iat``) against the
caller's clock and the identity claims (``iss``, ``aud``, ``sub``) against
the policy.  Every applicable check runs; the failures come back in a fixed
order so the same token and policy always produce the same reported reason:

    expiration -> not-before -> issued-at -> issuer -> audience -> subject
    -> required claims

Key Concepts Demonstrated:
- Deterministic ordering of independent checks
- Clock-skew tolerance applied symmetrically to time claims
- Multi-valued ``aud`` "contains" semantics (RFC 7519 section 4.1.3)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from .errors import (
    AudienceMismatch,
    ClaimError,
    Expired,
    InvalidClaim,
    IssuedInFuture,
    IssuerMismatch,
    MissingClaim,
    NotYetValid,
    SubjectMismatch,
)
from .policy import VerificationPolicy


def to_timestamp(now: datetime | int | float) -> float:
    """
    Normalise the caller's clock reading to Unix seconds.

    Raises:
        TypeError: If ``now`` is not a number or a ``datetime``.
        ValueError: If ``now`` is a naive ``datetime``.
    """
    if isinstance(now, datetime):
        if now.tzinfo is None or now.tzinfo.utcoffset(now) is None:
            raise ValueError("now must be a timezone-aware datetime")
        return now.timestamp()
    if isinstance(now, bool) or not isinstance(now, (int, float)):
        raise TypeError("now must be a Unix timestamp or a timezone-aware datetime")
    return float(now)


def _numeric_date(claims: Mapping[str, Any], name: str) -> float | None:
    if name not in claims:
        return None
    value = claims[name]
    # bool is an int subclass but never a NumericDate.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidClaim(name, f"{name} must be a numeric date")
    try:
        timestamp = float(value)
    except OverflowError:
        raise InvalidClaim(name, f"{name} is out of range") from None
    if not math.isfinite(timestamp):
        raise InvalidClaim(name, f"{name} is out of range")
    return timestamp


def _check_expiration(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    exp = _numeric_date(claims, "exp")
    if exp is None:
        if policy.require_expiration:
            raise MissingClaim("exp", "token has no expiration")
        return
    if now > exp + policy.skew_seconds:
        raise Expired("exp", "token has expired")


def _check_not_before(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    nbf = _numeric_date(claims, "nbf")
    if nbf is not None and now < nbf - policy.skew_seconds:
        raise NotYetValid("nbf", "token is not valid yet")


def _check_issued_at(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    iat = _numeric_date(claims, "iat")
    if iat is not None and iat > now + policy.skew_seconds:
        raise IssuedInFuture("iat", "token was issued in the future")


def _check_issuer(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    if policy.expected_issuer is None:
        return
    if claims.get("iss") != policy.expected_issuer:
        raise IssuerMismatch("iss", "token issuer does not match")


def _check_audience(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    if policy.expected_audience is None:
        return
    if "aud" not in claims:
        raise AudienceMismatch("aud", "token has no audience")

    aud = claims["aud"]
    if isinstance(aud, str):
        audiences = {aud}
    elif isinstance(aud, list) and all(isinstance(item, str) for item in aud):
        audiences = set(aud)
    else:
        raise InvalidClaim("aud", "aud must be a string or a list of strings")

    if audiences.isdisjoint(policy.expected_audience):
        raise AudienceMismatch("aud", "token audience does not match")


def _check_subject(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    if policy.expected_subject is None:
        return
    if claims.get("sub") != policy.expected_subject:
        raise SubjectMismatch("sub", "token subject does not match")


def _check_required(claims: Mapping[str, Any], policy: VerificationPolicy, now: float) -> None:
    for name in sorted(policy.required_claims):
        if name not in claims:
            raise MissingClaim(name, f"token is missing required claim {name!r}")


_CHECKS: tuple[Callable[[Mapping[str, Any], VerificationPolicy, float], None], ...] = (
    _check_expiration,
    _check_not_before,
    _check_issued_at,
    _check_issuer,
    _check_audience,
    _check_subject,
    _check_required,
)


def collect_failures(
    claims: Mapping[str, Any],
    policy: VerificationPolicy,
    now: datetime | int | float,
) -> list[ClaimError]:
    """Run every check and return all failures in reporting order."""
    timestamp = to_timestamp(now)
    failures: list[ClaimError] = []
    for check in _CHECKS:
        try:
            check(claims, policy, timestamp)
        except ClaimError as exc:
            failures.append(exc)
    return failures


def validate(
    claims: Mapping[str, Any],
    policy: VerificationPolicy,
    now: datetime | int | float,
) -> dict[str, Any]:
    """
    Validate ``claims`` against ``policy`` at time ``now``.

    Args:
        claims: Decoded payload.
        policy: Caller's verification policy.
        now: Current time as Unix seconds or an aware ``datetime``.

    Returns:
        A copy of the claims, unmodified, when every check passes.

    Raises:
        ClaimError: The first failure in reporting order.
    """
    failures = collect_failures(claims, policy, now)
    if failures:
        raise failures[0]
    return dict(claims)
