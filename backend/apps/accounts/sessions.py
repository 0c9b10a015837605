"""
Session tokens.

Sign-in yields {userId, email, credential}; the credential is an HS256 JWT
signed with SECRET_KEY and sent back as "Authorization: Bearer <jwt>".
Sign-out revokes the token's jti in the cache until it would have expired.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Any

import jwt
from django.conf import settings
from django.core.cache import cache

from apps.accounts.models import User

JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "cpl-manager"


class InvalidSessionError(Exception):
    """Session token is malformed, expired or revoked."""

    pass


@dataclass
class SessionClaims:
    """Validated contents of a session token."""

    user_id: str
    email: str
    session_id: str
    expires_at: int


@dataclass
class IssuedSession:
    """A freshly issued session."""

    user_id: str
    email: str
    credential: str
    expires_at: int


def _revocation_key(session_id: str) -> str:
    return f"revoked_session:{session_id}"


def issue_session(user: User) -> IssuedSession:
    """Sign a session token for a user."""
    now = int(time.time())
    expires_at = now + settings.SESSION_TTL_SECONDS
    payload: dict[str, Any] = {
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expires_at,
        "aud": JWT_AUDIENCE,
        "sub": str(user.id),
        "email": user.email,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=JWT_ALGORITHM)
    return IssuedSession(
        user_id=str(user.id),
        email=user.email,
        credential=token,
        expires_at=expires_at,
    )


def verify_session_token(token: str) -> SessionClaims:
    """
    Validate a session token.

    Raises:
        InvalidSessionError: If the token is invalid, expired or revoked
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            options={"require": ["exp", "sub", "jti"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidSessionError("Session expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidSessionError("Invalid session token") from e

    if cache.get(_revocation_key(payload["jti"])):
        raise InvalidSessionError("Session revoked")

    return SessionClaims(
        user_id=payload["sub"],
        email=payload.get("email", ""),
        session_id=payload["jti"],
        expires_at=payload["exp"],
    )


def revoke_session(claims: SessionClaims) -> None:
    """Revoke a session until its natural expiry."""
    remaining = max(claims.expires_at - int(time.time()), 1)
    cache.set(_revocation_key(claims.session_id), True, timeout=remaining)
