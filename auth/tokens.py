"""
auth/tokens.py -- JWT issue and verification.

Security design decisions:
  JWT: python-jose with HS256 (configurable among HS256/384/512). Tokens carry
       sub (user id), role, iat and exp. Nothing is persisted: a token is
       valid purely by signature and expiry. There is no revocation list;
       expiry is the only way a token ends.

  Expiry: a fixed window of Settings.token_expire_seconds from issue time.
       Callers cannot choose the lifetime. The `now` argument exists so tests
       can issue a token "in the past" and watch it expire.

  Errors: decode_access_token raises TokenExpired or TokenInvalid. The
       distinction is for logging and tests only -- the Authentication Gate
       turns both into the same 401.

  SECRET_KEY: sourced from core.config.get_settings(), which refuses to start
       without one. Rotating the key invalidates every token already issued.

Layer rule: no imports from api/ or tasks/. Import from core/ is allowed.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import TokenExpired, TokenInvalid
from auth.models import TokenClaims
from core.config import get_settings

_REQUIRED_CLAIMS = ("sub", "role", "iat", "exp")


def create_access_token(
    user_id: str,
    role: str,
    *,
    now: datetime | None = None,
    secret: str | None = None,
) -> str:
    """Encode a signed JWT asserting identity and role.

    Args:
        user_id: Opaque user id, stored as the sub claim.
        role:    "user" or "admin".
        now:     Issue time. Defaults to the current UTC time.
        secret:  Signing key override. Defaults to Settings.secret_key.
    """
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=settings.token_expire_seconds),
    }
    return jwt.encode(payload, secret or settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, *, secret: str | None = None) -> TokenClaims:
    """Verify a JWT and return its claims.

    Raises:
        TokenExpired: the signature is valid but exp has passed.
        TokenInvalid: anything else -- malformed, bad signature, wrong
                      algorithm, or a required claim is missing.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            secret or settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_iat": True, "require_sub": True},
        )
    except ExpiredSignatureError as exc:
        raise TokenExpired("Token has expired") from exc
    except JWTError as exc:
        raise TokenInvalid(f"Invalid token: {exc}") from exc

    missing = [claim for claim in _REQUIRED_CLAIMS if claim not in payload]
    if missing:
        raise TokenInvalid(f"Invalid token: missing claims {missing}")
    return TokenClaims(
        user_id=payload["sub"],
        role=payload["role"],
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
