"""
Key material handed to the verifier on every call.

A ``KeyMaterial`` value pairs the raw key with the family it belongs to
(symmetric secret, RSA public key or EC public key).  The family tag is what
lets the signature verifier refuse an HMAC token checked against an RSA key,
the classic algorithm-confusion trick.  Nothing here reads files or fetches
keys; loading from the environment is the job of ``config.py``.

Key Concepts Demonstrated:
- ``cryptography`` public-key loading (PEM, certificates, JWK numbers)
- Alternate constructors via ``classmethod``
- Refusing PEM/JWK text as an HMAC secret
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from . import codec
from .errors import MalformedEncoding

PublicKey = Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey]

_JWK_CURVES: dict[str, ec.EllipticCurve] = {
    "P-256": ec.SECP256R1(),
    "P-384": ec.SECP384R1(),
    "P-521": ec.SECP521R1(),
}

_NOT_A_SECRET_PREFIXES = (b"-----BEGIN", b"ssh-rsa", b"ssh-ed25519", b"ecdsa-sha2-")


class KeyFamily(str, Enum):
    """Kind of key an algorithm needs."""

    SYMMETRIC = "symmetric"
    RSA = "rsa"
    EC = "ec"


@dataclass(frozen=True)
class KeyMaterial:
    """
    Family-tagged verification key.

    Attributes:
        family: Which algorithm family this key can verify.
        value: ``bytes`` for symmetric secrets, otherwise a ``cryptography``
            public key object.
        kid: Optional key id matched against the token header ``kid``.
    """

    family: KeyFamily
    value: bytes | PublicKey = field(repr=False)
    kid: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "family", KeyFamily(self.family))
        expected = {
            KeyFamily.SYMMETRIC: bytes,
            KeyFamily.RSA: rsa.RSAPublicKey,
            KeyFamily.EC: ec.EllipticCurvePublicKey,
        }[self.family]
        if not isinstance(self.value, expected):
            raise TypeError(
                f"{self.family.value} key material must be {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )

    @property
    def curve_name(self) -> str | None:
        """Curve name for EC keys (e.g. ``"secp256r1"``), otherwise ``None``."""
        if isinstance(self.value, ec.EllipticCurvePublicKey):
            return self.value.curve.name
        return None

    @classmethod
    def symmetric(cls, secret: bytes | str, *, kid: str | None = None) -> KeyMaterial:
        """
        Wrap an HMAC shared secret.

        Raises:
            ValueError: If the secret is empty or looks like public key text,
                which would let a public key double as an HMAC secret.
        """
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not secret:
            raise ValueError("HMAC secret must not be empty")
        stripped = secret.strip()
        if stripped.startswith(_NOT_A_SECRET_PREFIXES) or stripped.startswith(b"{"):
            raise ValueError("refusing to use PEM, SSH or JWK text as an HMAC secret")
        return cls(KeyFamily.SYMMETRIC, bytes(secret), kid)

    @classmethod
    def from_public_key(cls, key: Any, *, kid: str | None = None) -> KeyMaterial:
        """Wrap a ``cryptography`` key; private keys are reduced to their public half."""
        if isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
            key = key.public_key()
        if isinstance(key, rsa.RSAPublicKey):
            return cls(KeyFamily.RSA, key, kid)
        if isinstance(key, ec.EllipticCurvePublicKey):
            return cls(KeyFamily.EC, key, kid)
        raise TypeError(f"unsupported key type: {type(key).__name__}")

    @classmethod
    def from_pem(cls, pem: bytes | str, *, kid: str | None = None) -> KeyMaterial:
        """Load an RSA or EC key from a PEM public key, certificate or private key."""
        data = pem.encode("utf-8") if isinstance(pem, str) else pem
        if b"-----BEGIN CERTIFICATE-----" in data:
            return cls.from_public_key(x509.load_pem_x509_certificate(data).public_key(), kid=kid)
        try:
            key: Any = serialization.load_pem_public_key(data)
        except ValueError:
            key = serialization.load_pem_private_key(data, password=None)
        return cls.from_public_key(key, kid=kid)

    @classmethod
    def from_jwk(cls, jwk: Mapping[str, Any]) -> KeyMaterial:
        """
        Build key material from a single JSON Web Key (RFC 7517).

        Supports ``oct``, ``RSA`` and ``EC`` key types.  Private members are
        ignored.  The JWK ``kid`` is carried over.

        Raises:
            ValueError: If the JWK is incomplete or describes an unsupported key.
        """
        kty = jwk.get("kty")
        kid = jwk.get("kid") if isinstance(jwk.get("kid"), str) else None

        if kty == "oct":
            return cls.symmetric(_jwk_bytes(jwk, "k"), kid=kid)
        if kty == "RSA":
            n = int.from_bytes(_jwk_bytes(jwk, "n"), "big")
            e = int.from_bytes(_jwk_bytes(jwk, "e"), "big")
            return cls(KeyFamily.RSA, rsa.RSAPublicNumbers(e, n).public_key(), kid)
        if kty == "EC":
            curve = _JWK_CURVES.get(jwk.get("crv"))
            if curve is None:
                raise ValueError(f"unsupported JWK curve: {jwk.get('crv')!r}")
            size = (curve.key_size + 7) // 8
            x = _jwk_bytes(jwk, "x")
            y = _jwk_bytes(jwk, "y")
            if len(x) != size or len(y) != size:
                raise ValueError("JWK EC coordinates have the wrong length for the curve")
            point = b"\x04" + x + y
            return cls(KeyFamily.EC, ec.EllipticCurvePublicKey.from_encoded_point(curve, point), kid)
        raise ValueError(f"unsupported JWK key type: {kty!r}")


def _jwk_bytes(jwk: Mapping[str, Any], member: str) -> bytes:
    value = jwk.get(member)
    if not isinstance(value, str) or not value:
        raise ValueError(f"JWK is missing member {member!r}")
    try:
        return codec.decode(value)
    except MalformedEncoding as exc:
        raise ValueError(f"JWK member {member!r} is not base64url") from exc
