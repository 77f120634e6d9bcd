"""
Flask integration for token verification.

Provides a decorator for protecting Flask endpoints with ``verify_token``.
The application supplies the key and policy once through ``init_app``; the
decorator reads them from ``current_app.config`` on every request, so each
verification still receives its key and policy explicitly.

Key Concepts Demonstrated:
- Decorator pattern for endpoint authentication (``require_auth``)
- Using ``flask.g`` to store request-scoped claims
- Logging the failure kind, never the token
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from functools import wraps

from flask import Flask, Response, current_app, g, jsonify, request

from .engine import KeySource, verify_token
from .policy import VerificationPolicy

logger = logging.getLogger(__name__)

KEY_CONFIG = "JWT_GUARD_KEY"
POLICY_CONFIG = "JWT_GUARD_POLICY"


def init_app(app: Flask, key: KeySource, policy: VerificationPolicy) -> None:
    """Store the verification key and policy on the application config."""
    if not isinstance(policy, VerificationPolicy):
        raise TypeError("policy must be a VerificationPolicy")
    app.config[KEY_CONFIG] = key
    app.config[POLICY_CONFIG] = policy
    logger.info(
        "Token verification enabled for algorithms: %s",
        ", ".join(sorted(policy.allowed_algorithms)),
    )


def bearer_token(header_value: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` value."""
    if not header_value or not header_value.startswith("Bearer "):
        return None
    token = header_value[7:].strip()
    return token or None


def require_auth(view_func: Callable[..., tuple[Response, int] | Response]):
    """
    Decorator that enforces Bearer-token authentication on a view.

    On success the validated claims are stored on ``g.claims`` and the
    header on ``g.token_header``.  On failure the request is answered with
    ``401`` and a JSON body naming the failure kind.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = bearer_token(request.headers.get("Authorization"))
        if token is None:
            return jsonify({"error": "Missing or invalid Authorization header"}), 401

        result = verify_token(
            token,
            current_app.config[KEY_CONFIG],
            current_app.config[POLICY_CONFIG],
            time.time(),
        )
        if not result.ok:
            logger.warning(
                "Rejected token on %s %s: %s (%s)",
                request.method,
                request.path,
                result.kind.value,
                result.failure.message,
            )
            return jsonify({"error": "Invalid or expired token", "reason": result.kind.value}), 401

        g.claims = result.claims
        g.token_header = result.header
        return view_func(*args, **kwargs)

    return wrapper
