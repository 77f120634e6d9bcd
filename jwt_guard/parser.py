"""
Compact serialization parser.

Splits a ``header.payload.signature`` token into its three segments,
decodes the header and payload into dictionaries and keeps the raw segment
text so the exact signing input can be rebuilt later.  The signing input is
never recomputed from the parsed dictionaries: re-encoding JSON can change
whitespace or member order and would break byte-for-byte equality with what
the issuer signed.

Key Concepts Demonstrated:
- Frozen dataclasses as immutable parse results
- Strict JSON decoding (duplicate members and NaN/Infinity are refused)
- Raw-bytes preservation for signature verification
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from . import codec
from .errors import InvalidJSON, StructureError


@dataclass(frozen=True)
class ParsedToken:
    """
    Decoded view of a compact token.

    Attributes:
        header: JOSE header members, guaranteed to contain a non-empty
            string ``alg``.
        claims: Payload members exactly as decoded.
        signature: Decoded bytes of the third segment.
        raw_header: First segment, verbatim.
        raw_payload: Second segment, verbatim.
    """

    header: dict[str, Any]
    claims: dict[str, Any]
    signature: bytes
    raw_header: str = field(repr=False)
    raw_payload: str = field(repr=False)

    @property
    def algorithm(self) -> str:
        return self.header["alg"]

    @property
    def key_id(self) -> str | None:
        kid = self.header.get("kid")
        return kid if isinstance(kid, str) else None

    @property
    def signing_input(self) -> bytes:
        """The bytes the issuer signed: ``raw_header + "." + raw_payload``."""
        return f"{self.raw_header}.{self.raw_payload}".encode("ascii")


def _reject_constant(name: str) -> Any:
    raise InvalidJSON(f"non-standard JSON constant {name} is not allowed")


def _unique_members(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    members: dict[str, Any] = {}
    for name, value in pairs:
        if name in members:
            raise InvalidJSON(f"duplicate member {name!r}")
        members[name] = value
    return members


def decode_object(segment: str, label: str) -> dict[str, Any]:
    """
    Decode one base64url segment into a JSON object.

    Raises:
        MalformedEncoding: If the segment is not valid base64url.
        InvalidJSON: If the bytes are not a strict UTF-8 JSON object.
    """
    raw = codec.decode(segment)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidJSON(f"{label} is not valid UTF-8") from exc

    try:
        value = json.loads(
            text,
            object_pairs_hook=_unique_members,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise InvalidJSON(f"{label} is not valid JSON: {exc.msg}") from exc
    except ValueError as exc:
        # int() refuses numbers past sys.get_int_max_str_digits().
        raise InvalidJSON(f"{label} contains an unparseable number") from exc
    except RecursionError as exc:
        raise InvalidJSON(f"{label} is nested too deeply") from exc

    if not isinstance(value, dict):
        raise InvalidJSON(f"{label} must be a JSON object")
    return value


def parse(token: str) -> ParsedToken:
    """
    Parse a compact token without verifying anything.

    Args:
        token: The token string as received from the caller.

    Returns:
        A ``ParsedToken`` holding the decoded header, claims and signature.

    Raises:
        StructureError: If the token is not three non-empty segments.
        MalformedEncoding: If a segment is not valid base64url.
        InvalidJSON: If the header or payload is not a JSON object, or the
            header lacks a usable ``alg``.
    """
    if not isinstance(token, str):
        raise StructureError("token must be a string")

    segments = token.split(".")
    if len(segments) != 3:
        raise StructureError(f"expected 3 segments, found {len(segments)}")

    raw_header, raw_payload, raw_signature = segments
    if not raw_header or not raw_payload or not raw_signature:
        raise StructureError("header, payload and signature segments must not be empty")

    header = decode_object(raw_header, "header")
    alg = header.get("alg")
    if not isinstance(alg, str) or not alg:
        raise InvalidJSON("header must contain a non-empty string 'alg'")

    claims = decode_object(raw_payload, "payload")
    signature = codec.decode(raw_signature)

    return ParsedToken(
        header=header,
        claims=claims,
        signature=signature,
        raw_header=raw_header,
        raw_payload=raw_payload,
    )
