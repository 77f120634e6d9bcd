"""Caller-supplied verification policy."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta

DEFAULT_CLOCK_SKEW = timedelta(seconds=30)


def _name_set(value: str | Iterable[str] | None, field_name: str, *, allow_single: bool) -> frozenset[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        if not allow_single:
            raise TypeError(f"{field_name} must be a collection of names, not a single string")
        value = [value]
    names = frozenset(value)
    if not names:
        raise ValueError(f"{field_name} must not be empty")
    for name in names:
        if not isinstance(name, str) or not name:
            raise ValueError(f"{field_name} entries must be non-empty strings")
    return names


@dataclass(frozen=True)
class VerificationPolicy:
    """
    What the caller is willing to accept.

    Attributes:
        allowed_algorithms: Algorithm names the caller trusts.  Mandatory;
            there is no implicit default.
        expected_issuer: Exact ``iss`` value required, if set.
        expected_audience: Audience value(s); the token ``aud`` must
            contain at least one of them.
        clock_skew_tolerance: Slack applied to ``exp``/``nbf``/``iat``.
            Accepts a ``timedelta`` or a number of seconds.
        require_expiration: Reject tokens without ``exp``.
        expected_subject: Exact ``sub`` value required, if set.
        required_claims: Claim names that must be present.
    """

    allowed_algorithms: frozenset[str]
    expected_issuer: str | None = None
    expected_audience: frozenset[str] | None = None
    clock_skew_tolerance: timedelta = DEFAULT_CLOCK_SKEW
    require_expiration: bool = True
    expected_subject: str | None = None
    required_claims: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise fields through object.__setattr__.
        allowed = _name_set(self.allowed_algorithms, "allowed_algorithms", allow_single=False)
        if allowed is None:
            raise ValueError("allowed_algorithms is required")
        object.__setattr__(self, "allowed_algorithms", allowed)

        object.__setattr__(
            self,
            "expected_audience",
            _name_set(self.expected_audience, "expected_audience", allow_single=True),
        )
        required = frozenset()
        if self.required_claims:
            required = _name_set(self.required_claims, "required_claims", allow_single=False)
        object.__setattr__(self, "required_claims", required)

        for name in ("expected_issuer", "expected_subject"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be a string")

        skew = self.clock_skew_tolerance
        if isinstance(skew, bool) or not isinstance(skew, (timedelta, int, float)):
            raise TypeError("clock_skew_tolerance must be a timedelta or a number of seconds")
        if not isinstance(skew, timedelta):
            skew = timedelta(seconds=skew)
        if skew < timedelta(0):
            raise ValueError("clock_skew_tolerance must not be negative")
        object.__setattr__(self, "clock_skew_tolerance", skew)

    @property
    def skew_seconds(self) -> float:
        return self.clock_skew_tolerance.total_seconds()
