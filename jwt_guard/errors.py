"""
Failure taxonomy for token verification.

Every way a token can be rejected has its own exception class and its own
``FailureKind`` value.  Inner components raise these exceptions; the
orchestrator in ``engine.py`` catches them and hands the caller a typed
``VerificationResult`` instead, so security-relevant outcomes (an expired
token versus a forged one) can be told apart without string matching.

Key Concepts Demonstrated:
- ``str, Enum`` inheritance for JSON-friendly failure codes
- A small exception hierarchy grouped by verification stage
- Exception chaining to keep the low-level cause for debugging
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """
    Stable identifiers for each verification failure.

    Inherits from ``str`` so values can be logged or returned in JSON
    responses directly.
    """

    STRUCTURE_ERROR = "structure_error"
    MALFORMED_ENCODING = "malformed_encoding"
    INVALID_JSON = "invalid_json"
    UNKNOWN_ALGORITHM = "unknown_algorithm"
    ALGORITHM_NOT_ALLOWED = "algorithm_not_allowed"
    KEY_MISMATCH = "key_mismatch"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"
    NOT_YET_VALID = "not_yet_valid"
    ISSUED_IN_FUTURE = "issued_in_future"
    MISSING_CLAIM = "missing_claim"
    ISSUER_MISMATCH = "issuer_mismatch"
    AUDIENCE_MISMATCH = "audience_mismatch"
    SUBJECT_MISMATCH = "subject_mismatch"
    INVALID_CLAIM = "invalid_claim"


class VerificationFailure(Exception):
    """
    Base class for every token rejection.

    Attributes:
        kind: The ``FailureKind`` identifying this failure.
        message: Human-readable detail.  Never contains the token itself.
    """

    kind: FailureKind

    def __init__(self, message: str = "") -> None:
        if getattr(type(self), "kind", None) is None:
            raise TypeError(
                f"{type(self).__name__} is an abstract failure group; raise a concrete subclass"
            )
        self.message = message or self.kind.value.replace("_", " ")
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


# -----------------------------------------------------------------------------
# Token format
# -----------------------------------------------------------------------------


class TokenFormatError(VerificationFailure):
    """The token could not be decoded into header, payload and signature."""


class StructureError(TokenFormatError):
    kind = FailureKind.STRUCTURE_ERROR


class MalformedEncoding(TokenFormatError):
    kind = FailureKind.MALFORMED_ENCODING


class InvalidJSON(TokenFormatError):
    kind = FailureKind.INVALID_JSON


# -----------------------------------------------------------------------------
# Algorithm, key and signature
# -----------------------------------------------------------------------------


class AlgorithmError(VerificationFailure):
    """The header algorithm cannot or must not be used."""


class UnknownAlgorithm(AlgorithmError):
    kind = FailureKind.UNKNOWN_ALGORITHM


class AlgorithmNotAllowed(AlgorithmError):
    kind = FailureKind.ALGORITHM_NOT_ALLOWED


class KeyMismatch(VerificationFailure):
    kind = FailureKind.KEY_MISMATCH


class SignatureInvalid(VerificationFailure):
    kind = FailureKind.SIGNATURE_INVALID


# -----------------------------------------------------------------------------
# Claims
# -----------------------------------------------------------------------------


class ClaimError(VerificationFailure):
    """
    A claim failed policy validation.

    Attributes:
        claim: Name of the offending claim (``"exp"``, ``"aud"``, ...).
    """

    def __init__(self, claim: str, message: str = "") -> None:
        self.claim = claim
        super().__init__(message)


class Expired(ClaimError):
    kind = FailureKind.EXPIRED


class NotYetValid(ClaimError):
    kind = FailureKind.NOT_YET_VALID


class IssuedInFuture(ClaimError):
    kind = FailureKind.ISSUED_IN_FUTURE


class MissingClaim(ClaimError):
    kind = FailureKind.MISSING_CLAIM


class IssuerMismatch(ClaimError):
    kind = FailureKind.ISSUER_MISMATCH


class AudienceMismatch(ClaimError):
    kind = FailureKind.AUDIENCE_MISMATCH


class SubjectMismatch(ClaimError):
    kind = FailureKind.SUBJECT_MISMATCH


class InvalidClaim(ClaimError):
    kind = FailureKind.INVALID_CLAIM
