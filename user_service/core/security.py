"""Bearer tokens identifying API callers.

Tokens are signed JWTs whose ``sub`` claim names the caller. The users API
resolves them per request; no endpoint requires one.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from user_service.config import settings


def issue_token(subject: str, expires_in: timedelta | None = None, **claims: Any) -> str:
    """Sign a token for ``subject``.

    Args:
        subject: Caller identifier stored in the ``sub`` claim
        expires_in: Lifetime, ``ACCESS_TOKEN_EXPIRE_MINUTES`` when omitted
        **claims: Extra claims to embed

    Returns:
        Encoded JWT
    """
    lifetime = expires_in if expires_in is not None else timedelta(minutes=settings.access_token_expire_minutes)
    issued_at = datetime.now(timezone.utc)

    payload = {**claims, "sub": subject, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def read_token(token: str) -> dict[str, Any] | None:
    """Verify a token and return its claims, or None if it is expired or forged."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def token_subject(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token."""
    claims = read_token(token)
    if claims is None:
        return None
    subject = claims.get("sub")
    return subject if isinstance(subject, str) and subject else None
