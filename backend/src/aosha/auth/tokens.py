"""JWT access tokens.

Tokens carry the caller's identity directly (``userId``, ``username``,
``role``) so the socket handshake and REST dependencies can build an
``Identity`` without a database round trip.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from aosha.auth.models import UserRole
from aosha.config import Settings, settings as default_settings
from aosha.models.identity import Identity

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """Raised when a token is missing, malformed, expired or forged."""


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    *,
    settings: Optional[Settings] = None,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Sign a token for a user."""
    cfg = settings or default_settings
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "userId": user_id,
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + (expires_in or timedelta(hours=cfg.jwt_expires_hours)),
    }
    return jwt.encode(payload, cfg.jwt_secret, algorithm=cfg.jwt_algorithm)


def verify_access_token(token: Any, *, settings: Optional[Settings] = None) -> Identity:
    """Verify a token and return the identity it carries.

    Raises:
        InvalidTokenError: on any problem with the token or its claims
    """
    cfg = settings or default_settings
    if not token or not isinstance(token, str):
        raise InvalidTokenError("No token provided")

    try:
        claims = jwt.decode(token, cfg.jwt_secret, algorithms=[cfg.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e

    user_id = claims.get("userId")
    username = claims.get("username")
    try:
        role = UserRole(claims.get("role"))
    except ValueError as e:
        raise InvalidTokenError("Token carries an unknown role") from e

    if not isinstance(user_id, int) or isinstance(user_id, bool) or not username:
        raise InvalidTokenError("Token missing identity claims")

    return Identity(id=user_id, username=str(username), role=role)
