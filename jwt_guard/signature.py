"""
Signature verification.

The header ``alg`` only decides *which* check runs.  Whether that algorithm
is trusted at all is decided by the caller's allow-list in ``engine.py``
before this module is reached.  What this module adds is the key check: the
supplied key must belong to the family (and, for ECDSA, the curve) the
algorithm needs, otherwise the result is ``KeyMismatch`` rather than an
attempt to verify with the wrong kind of key.
"""

from __future__ import annotations

from . import algorithms
from .algorithms import Algorithm
from .errors import KeyMismatch, SignatureInvalid
from .keys import KeyMaterial


def check_key(algorithm: Algorithm, key: KeyMaterial) -> None:
    """Raise ``KeyMismatch`` unless ``key`` can be used with ``algorithm``."""
    if algorithm.family is None:
        return
    if key.family is not algorithm.family:
        raise KeyMismatch(
            f"{algorithm.name} requires a {algorithm.family.value} key, "
            f"got a {key.family.value} key"
        )
    if algorithm.curve is not None and key.curve_name != algorithm.curve.name:
        raise KeyMismatch(
            f"{algorithm.name} requires curve {algorithm.curve.name}, got {key.curve_name}"
        )


def verify_signature(alg: str, signing_input: bytes, signature: bytes, key: KeyMaterial) -> bool:
    """
    Check ``signature`` over ``signing_input`` with ``key``.

    Args:
        alg: Algorithm identifier from the token header.
        signing_input: The raw ``header.payload`` bytes as received.
        signature: Decoded signature bytes.
        key: Caller-supplied key material.

    Returns:
        ``True`` if the signature is valid, ``False`` otherwise.

    Raises:
        UnknownAlgorithm: If ``alg`` is not in the registry.
        KeyMismatch: If the key family or curve does not fit the algorithm.
        AlgorithmNotAllowed: If ``alg`` is ``none``.
    """
    algorithm = algorithms.resolve(alg)
    check_key(algorithm, key)
    return algorithm.verify(signing_input, signature, key)


def require_valid_signature(
    alg: str, signing_input: bytes, signature: bytes, key: KeyMaterial
) -> None:
    """Like ``verify_signature`` but raises ``SignatureInvalid`` on a bad signature."""
    if not verify_signature(alg, signing_input, signature, key):
        raise SignatureInvalid(f"{alg} signature does not match")
