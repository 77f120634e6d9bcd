"""Strict unpadded base64url codec used for every token segment."""

from __future__ import annotations

import base64
import binascii
import re

from .errors import MalformedEncoding

_SEGMENT_PATTERN = re.compile(r"[A-Za-z0-9_-]*(={0,2})")


def encode(data: bytes) -> str:
    """Encode bytes as URL-safe base64 with the ``=`` padding stripped."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def decode(segment: str) -> bytes:
    """
    Decode a base64url segment, rejecting anything that is not canonical.

    Padding is optional, but when present it must bring the length to a
    multiple of four.  Characters outside the URL-safe alphabet, impossible
    lengths and non-zero trailing bits all raise ``MalformedEncoding``
    instead of being skipped or truncated.

    Args:
        segment: One dot-separated part of a compact token.

    Returns:
        The decoded bytes.

    Raises:
        MalformedEncoding: If the segment is not valid base64url.
    """
    if not isinstance(segment, str):
        raise MalformedEncoding("segment must be a string")

    match = _SEGMENT_PATTERN.fullmatch(segment)
    if match is None:
        raise MalformedEncoding("segment contains characters outside the base64url alphabet")

    padding = match.group(1)
    body = segment[: len(segment) - len(padding)]
    if len(body) % 4 == 1:
        raise MalformedEncoding("segment length is not a valid base64url length")
    if padding and len(segment) % 4 != 0:
        raise MalformedEncoding("segment padding is inconsistent with its length")

    try:
        data = base64.urlsafe_b64decode(body + "=" * (-len(body) % 4))
    except (binascii.Error, ValueError) as exc:
        raise MalformedEncoding("segment is not valid base64url") from exc

    # Leftover bits in the final character must be zero.
    if encode(data) != body:
        raise MalformedEncoding("segment has non-canonical trailing bits")
    return data
