"""
Unit tests for signature verification across every supported algorithm.

Tokens are minted with PyJWT so the verifier is checked against an
independent implementation rather than against itself.

Key SDET Concepts Demonstrated:
- Cross-implementation testing (PyJWT signs, jwt-guard verifies)
- Key-family and curve mismatch detection
- Single-byte tampering of signature and signing input
"""

from __future__ import annotations

import pytest

from jwt_guard import KeyMaterial, KeyMismatch, SignatureInvalid, UnknownAlgorithm, parse
from jwt_guard.algorithms import SUPPORTED_ALGORITHMS
from jwt_guard.signature import require_valid_signature, verify_signature
from shared.test_helpers import (
    TEST_PUBLIC_KEY,
    create_test_token,
    generate_throwaway_key_pair,
    verification_key_for,
)

pytestmark = pytest.mark.unit

ALL_ALGORITHMS = sorted(SUPPORTED_ALGORITHMS)


@pytest.mark.parametrize("alg", ALL_ALGORITHMS)
def test_valid_signature_verifies(alg):
    """Test that a PyJWT-signed token verifies with the matching key."""
    # Arrange
    parsed = parse(create_test_token(algorithm=alg))

    # Act
    valid = verify_signature(alg, parsed.signing_input, parsed.signature, verification_key_for(alg))

    # Assert
    assert valid is True


@pytest.mark.parametrize("alg", ALL_ALGORITHMS)
def test_altered_signing_input_fails(alg):
    """Test that changing one byte of the signed bytes breaks verification."""
    parsed = parse(create_test_token(algorithm=alg))
    altered = bytearray(parsed.signing_input)
    altered[-1] ^= 0x01

    assert verify_signature(alg, bytes(altered), parsed.signature, verification_key_for(alg)) is False


@pytest.mark.parametrize("alg", ["HS256", "ES256", "ES512"])
def test_wrong_length_signature_fails(alg):
    """Test that truncated or extended fixed-length signatures are simply invalid."""
    parsed = parse(create_test_token(algorithm=alg))
    key = verification_key_for(alg)

    assert verify_signature(alg, parsed.signing_input, parsed.signature[:-1], key) is False
    assert verify_signature(alg, parsed.signing_input, parsed.signature + b"\x00", key) is False


def test_rsa_signature_from_other_key_fails():
    other_private, _ = generate_throwaway_key_pair()
    parsed = parse(create_test_token(algorithm="RS256", private_key=other_private))

    assert verify_signature("RS256", parsed.signing_input, parsed.signature, KeyMaterial.from_pem(TEST_PUBLIC_KEY)) is False


def test_hmac_signature_with_other_secret_fails():
    parsed = parse(create_test_token(algorithm="HS256"))
    other = KeyMaterial.symmetric("a-completely-different-secret-of-reasonable-length-0123456789")

    assert verify_signature("HS256", parsed.signing_input, parsed.signature, other) is False


def test_known_hs256_vector():
    """Test the widely published HS256 example token."""
    token = (
        "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
        ".eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ"
        ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
    )
    parsed = parse(token)

    assert verify_signature("HS256", parsed.signing_input, parsed.signature, KeyMaterial.symmetric("your-256-bit-secret"))


@pytest.mark.parametrize(
    ("alg", "key_alg"),
    [
        ("HS256", "RS256"),
        ("HS256", "ES256"),
        ("RS256", "HS256"),
        ("PS256", "ES256"),
        ("ES256", "RS256"),
        ("ES256", "HS256"),
    ],
)
def test_wrong_key_family_is_key_mismatch(alg, key_alg):
    """Test that a key of the wrong family is refused before any crypto runs."""
    parsed = parse(create_test_token(algorithm=alg))

    with pytest.raises(KeyMismatch):
        verify_signature(alg, parsed.signing_input, parsed.signature, verification_key_for(key_alg))


@pytest.mark.parametrize(("alg", "key_alg"), [("ES256", "ES384"), ("ES384", "ES512"), ("ES512", "ES256")])
def test_wrong_curve_is_key_mismatch(alg, key_alg):
    parsed = parse(create_test_token(algorithm=alg))

    with pytest.raises(KeyMismatch):
        verify_signature(alg, parsed.signing_input, parsed.signature, verification_key_for(key_alg))


def test_unknown_algorithm_is_reported():
    with pytest.raises(UnknownAlgorithm):
        verify_signature("XS256", b"a.b", b"sig", verification_key_for("HS256"))


def test_require_valid_signature_raises_signature_invalid():
    parsed = parse(create_test_token(algorithm="RS256"))

    with pytest.raises(SignatureInvalid):
        require_valid_signature("RS256", parsed.signing_input, b"\x00" * 256, verification_key_for("RS256"))
