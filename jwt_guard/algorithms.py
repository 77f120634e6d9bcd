"""
Closed registry of signature algorithms.

The table below is the complete list of ``alg`` values the engine knows
about.  It is wrapped in a read-only mapping and there is no registration
hook, so adding an algorithm means changing this file.

``none`` is listed on purpose: it resolves to an entry whose check always
fails, so an unsigned token can never be mistaken for a verified one, even
when a caller puts ``"none"`` in its allow-list.

Key Concepts Demonstrated:
- Immutable lookup tables with ``types.MappingProxyType``
- RSASSA-PKCS1-v1_5, RSASSA-PSS, ECDSA and HMAC via ``cryptography``
- JOSE raw ``r || s`` ECDSA signatures converted to DER for verification
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature

from .errors import AlgorithmNotAllowed, UnknownAlgorithm
from .keys import KeyFamily, KeyMaterial


class SignatureScheme(str, Enum):
    """Underlying signature primitive."""

    HMAC = "hmac"
    RSA_PKCS1V15 = "rsa-pkcs1v15"
    RSA_PSS = "rsa-pss"
    ECDSA = "ecdsa"
    NONE = "none"


@dataclass(frozen=True)
class Algorithm:
    """
    One registry entry.

    Attributes:
        name: The JOSE ``alg`` identifier.
        scheme: Signature primitive used by ``verify``.
        family: Key family the algorithm requires (``None`` for ``none``).
        hash_algorithm: ``cryptography`` hash class.
        curve: Required curve for ECDSA entries.
        signature_length: Exact signature size in bytes where the algorithm
            fixes it (HMAC digest size, ECDSA ``r || s``); ``None`` for RSA,
            whose size follows the key modulus.
    """

    name: str
    scheme: SignatureScheme
    family: KeyFamily | None
    hash_algorithm: type[hashes.HashAlgorithm] | None = None
    curve: type[ec.EllipticCurve] | None = None
    signature_length: int | None = None

    def require_signed(self) -> None:
        """Raise ``AlgorithmNotAllowed`` for the unsecured ``none`` entry."""
        if self.scheme is SignatureScheme.NONE:
            raise AlgorithmNotAllowed("the 'none' algorithm is never accepted")

    def verify(self, signing_input: bytes, signature: bytes, key: KeyMaterial) -> bool:
        """
        Run the cryptographic check.

        The key family must already have been checked by the caller.

        Returns:
            ``True`` only when the signature is valid for ``signing_input``.

        Raises:
            AlgorithmNotAllowed: Always, for the ``none`` entry.
        """
        self.require_signed()

        if self.signature_length is not None and len(signature) != self.signature_length:
            return False

        try:
            if self.scheme is SignatureScheme.HMAC:
                mac = crypto_hmac.HMAC(key.value, self.hash_algorithm())
                mac.update(signing_input)
                # HMAC.verify compares in constant time.
                mac.verify(signature)
            elif self.scheme is SignatureScheme.RSA_PKCS1V15:
                key.value.verify(signature, signing_input, padding.PKCS1v15(), self.hash_algorithm())
            elif self.scheme is SignatureScheme.RSA_PSS:
                digest = self.hash_algorithm()
                pss = padding.PSS(mgf=padding.MGF1(digest), salt_length=digest.digest_size)
                key.value.verify(signature, signing_input, pss, digest)
            else:
                half = len(signature) // 2
                r = int.from_bytes(signature[:half], "big")
                s = int.from_bytes(signature[half:], "big")
                key.value.verify(
                    encode_dss_signature(r, s),
                    signing_input,
                    ec.ECDSA(self.hash_algorithm()),
                )
        except InvalidSignature:
            return False
        return True


_REGISTRY = MappingProxyType(
    {
        entry.name: entry
        for entry in (
            Algorithm("HS256", SignatureScheme.HMAC, KeyFamily.SYMMETRIC, hashes.SHA256, signature_length=32),
            Algorithm("HS384", SignatureScheme.HMAC, KeyFamily.SYMMETRIC, hashes.SHA384, signature_length=48),
            Algorithm("HS512", SignatureScheme.HMAC, KeyFamily.SYMMETRIC, hashes.SHA512, signature_length=64),
            Algorithm("RS256", SignatureScheme.RSA_PKCS1V15, KeyFamily.RSA, hashes.SHA256),
            Algorithm("RS384", SignatureScheme.RSA_PKCS1V15, KeyFamily.RSA, hashes.SHA384),
            Algorithm("RS512", SignatureScheme.RSA_PKCS1V15, KeyFamily.RSA, hashes.SHA512),
            Algorithm("PS256", SignatureScheme.RSA_PSS, KeyFamily.RSA, hashes.SHA256),
            Algorithm("PS384", SignatureScheme.RSA_PSS, KeyFamily.RSA, hashes.SHA384),
            Algorithm("PS512", SignatureScheme.RSA_PSS, KeyFamily.RSA, hashes.SHA512),
            Algorithm("ES256", SignatureScheme.ECDSA, KeyFamily.EC, hashes.SHA256, ec.SECP256R1, 64),
            Algorithm("ES384", SignatureScheme.ECDSA, KeyFamily.EC, hashes.SHA384, ec.SECP384R1, 96),
            Algorithm("ES512", SignatureScheme.ECDSA, KeyFamily.EC, hashes.SHA512, ec.SECP521R1, 132),
            Algorithm("none", SignatureScheme.NONE, None),
        )
    }
)

SUPPORTED_ALGORITHMS = frozenset(name for name in _REGISTRY if name != "none")


def resolve(alg: str) -> Algorithm:
    """
    Look up the registry entry for an ``alg`` identifier.

    Matching is exact and case-sensitive.

    Raises:
        UnknownAlgorithm: If the identifier is not in the registry.
    """
    try:
        return _REGISTRY[alg]
    except (KeyError, TypeError):
        raise UnknownAlgorithm(f"unsupported algorithm {alg!r}") from None
