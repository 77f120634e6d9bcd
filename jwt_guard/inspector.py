"""
Unverified token inspection.

Decodes and pretty-prints the header and payload of a token *without*
checking its signature or claims.  Meant for debugging at a terminal; never
use its output to make an authorization decision.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from .errors import StructureError, VerificationFailure
from .parser import decode_object

logger = logging.getLogger(__name__)

# Header: {"alg":"HS256","typ":"JWT"}
# Payload: {"sub":"1234567890","name":"John Doe","iat":1516239022,"admin":true,"email":"john.doe@example.com"}
EXAMPLE_TOKEN = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyLCJhZG1pbiI6dHJ1ZSwiZW1haWwiOiJqb2huLmRvZUBleGFtcGxlLmNvbSJ9"
    ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
)

USAGE = 'Usage: jwt-guard-inspect [--header] "<YOUR_JWT_TOKEN_STRING>"'


def _segments(token: str) -> list[str]:
    segments = token.strip().split(".")
    if len(segments) < 2:
        raise StructureError("token does not contain enough parts")
    return segments


def decode_payload(token: str) -> dict[str, Any]:
    """
    Return the payload of ``token`` without verifying anything.

    Only the second segment is decoded; the header and signature may be
    anything, including missing or garbage.

    Raises:
        VerificationFailure: A ``TokenFormatError`` subclass on bad input.
    """
    return decode_object(_segments(token)[1], "payload")


def decode_header(token: str) -> dict[str, Any]:
    """Return the header of ``token`` without verifying anything."""
    return decode_object(_segments(token)[0], "header")


def format_json(document: Mapping[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def main(argv: Sequence[str] | None = None) -> int:
    """Print the decoded payload (and optionally the header) of a token."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = list(sys.argv[1:] if argv is None else argv)
    show_header = "--header" in args
    args = [arg for arg in args if arg != "--header"]

    if args:
        token = args[0]
    else:
        print("No JWT provided as a command-line argument.")
        print(USAGE)
        print("\nUsing a default example JWT:")
        print(f"Default JWT: {EXAMPLE_TOKEN}")
        token = EXAMPLE_TOKEN

    try:
        claims = decode_payload(token)
        header = decode_header(token) if show_header else None
    except VerificationFailure as exc:
        print(f"\nError decoding JWT: {exc.message} [{exc.kind.value}]", file=sys.stderr)
        if exc.__cause__ is not None:
            print(f"Caused by: {exc.__cause__}", file=sys.stderr)
        return 1

    logger.info("Decoded unverified token payload; signature NOT checked")
    if header is not None:
        print(format_json(header))
    print(format_json(claims))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
