"""
Verification orchestrator.

``verify_token`` is the single public entry point.  It runs the stages in a
fixed order and stops at the first failure:

    parse -> algorithm allow-list -> algorithm lookup -> key selection
    -> signature -> claims

Token problems never escape as exceptions; they come back as a failed
``VerificationResult`` carrying one ``VerificationFailure``.  Passing the
wrong *types* for key, policy or clock is a programming error and raises
``TypeError`` straight away.

The engine keeps no state between calls, performs no I/O and does not log;
wrappers such as ``flask_auth`` decide what to record.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from . import algorithms
from . import claims as claims_validator
from .errors import AlgorithmNotAllowed, FailureKind, KeyMismatch, VerificationFailure
from .keys import KeyMaterial
from .parser import ParsedToken, parse
from .policy import VerificationPolicy
from .signature import require_valid_signature

KeySource = Union[KeyMaterial, Mapping[str, KeyMaterial]]


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of one ``verify_token`` call.

    Exactly one of ``claims`` and ``failure`` is set.

    Attributes:
        claims: The validated claims set on success.
        header: The decoded JOSE header on success.
        failure: The reason for rejection on failure.
    """

    claims: dict[str, Any] | None = None
    header: dict[str, Any] | None = None
    failure: VerificationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def kind(self) -> FailureKind | None:
        return None if self.failure is None else self.failure.kind

    def unwrap(self) -> dict[str, Any]:
        """Return the claims, or raise the carried failure."""
        if self.failure is not None:
            raise self.failure
        return self.claims


def _select_key(token: ParsedToken, key: KeySource) -> KeyMaterial:
    """Pick the key for this token, honouring the header ``kid``."""
    if isinstance(key, KeyMaterial):
        if key.kid is not None and token.key_id is not None and key.kid != token.key_id:
            raise KeyMismatch("token kid does not match the supplied key")
        return key

    kid = token.key_id
    if kid is None:
        raise KeyMismatch("token header has no kid to select a key with")
    selected = key.get(kid)
    if selected is None:
        raise KeyMismatch("token kid is not in the supplied key set")
    if not isinstance(selected, KeyMaterial):
        raise TypeError("key set values must be KeyMaterial")
    return selected


def verify_token(
    token: str,
    key: KeySource,
    policy: VerificationPolicy,
    now: datetime | int | float,
) -> VerificationResult:
    """
    Verify a compact signed token.

    Args:
        token: The untrusted token string.
        key: Key material, or a mapping of ``kid`` to key material.
        policy: The caller's verification policy.
        now: The caller's current time (Unix seconds or aware ``datetime``).

    Returns:
        A successful result with the claims, or a failed result with the
        first failure encountered.

    Raises:
        TypeError: If ``key``, ``policy`` or ``now`` has the wrong type.
        ValueError: If ``now`` is a naive ``datetime``.
    """
    if not isinstance(key, (KeyMaterial, Mapping)):
        raise TypeError("key must be KeyMaterial or a mapping of kid to KeyMaterial")
    if not isinstance(policy, VerificationPolicy):
        raise TypeError("policy must be a VerificationPolicy")
    timestamp = claims_validator.to_timestamp(now)

    try:
        parsed = parse(token)
        alg = parsed.algorithm
        if alg not in policy.allowed_algorithms:
            raise AlgorithmNotAllowed(f"algorithm {alg!r} is not allowed by policy")
        # Unknown and unsecured algorithms are reported before any key is chosen.
        algorithms.resolve(alg).require_signed()
        selected = _select_key(parsed, key)
        require_valid_signature(alg, parsed.signing_input, parsed.signature, selected)
        validated = claims_validator.validate(parsed.claims, policy, timestamp)
    except VerificationFailure as failure:
        return VerificationResult(failure=failure)

    return VerificationResult(claims=validated, header=dict(parsed.header))
