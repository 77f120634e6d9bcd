"""
jwt-guard: verification of compact signed tokens (JWS / JWT).

Exposes ``verify_token`` together with the types needed to call it.  Key
loading and environment configuration live in ``jwt_guard.config``, the
Flask decorator in ``jwt_guard.flask_auth`` and the unverified inspector in
``jwt_guard.inspector``.
"""

from .algorithms import SUPPORTED_ALGORITHMS
from .engine import VerificationResult, verify_token
from .errors import (
    AlgorithmError,
    AlgorithmNotAllowed,
    AudienceMismatch,
    ClaimError,
    Expired,
    FailureKind,
    InvalidClaim,
    InvalidJSON,
    IssuedInFuture,
    IssuerMismatch,
    KeyMismatch,
    MalformedEncoding,
    MissingClaim,
    NotYetValid,
    SignatureInvalid,
    StructureError,
    SubjectMismatch,
    TokenFormatError,
    UnknownAlgorithm,
    VerificationFailure,
)
from .keys import KeyFamily, KeyMaterial
from .parser import ParsedToken, parse
from .policy import VerificationPolicy

__all__ = [
    "SUPPORTED_ALGORITHMS",
    "AlgorithmError",
    "AlgorithmNotAllowed",
    "AudienceMismatch",
    "ClaimError",
    "Expired",
    "FailureKind",
    "InvalidClaim",
    "InvalidJSON",
    "IssuedInFuture",
    "IssuerMismatch",
    "KeyFamily",
    "KeyMaterial",
    "KeyMismatch",
    "MalformedEncoding",
    "MissingClaim",
    "NotYetValid",
    "ParsedToken",
    "SignatureInvalid",
    "StructureError",
    "SubjectMismatch",
    "TokenFormatError",
    "UnknownAlgorithm",
    "VerificationFailure",
    "VerificationPolicy",
    "VerificationResult",
    "parse",
    "verify_token",
]
