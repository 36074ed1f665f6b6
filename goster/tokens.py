"""Signed access tokens."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

ISSUER = "Goster"
_HMAC = ["HS256", "HS384", "HS512"]


class TokenError(ValueError):
    """Raised when a token cannot be issued or accepted."""


@dataclass(frozen=True)
class Claims:
    id: str
    is_admin: bool
    issuer: Optional[str] = None
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    def user_id(self) -> uuid.UUID:
        try:
            return uuid.UUID(self.id)
        except (ValueError, TypeError, AttributeError) as exc:
            raise TokenError(f"invalid user id: {self.id!r}") from exc


def generate_token(user_id: uuid.UUID | str, is_admin: bool, hours: int, secret: str) -> str:
    """Issue an HS256 token valid for hours hours (4 when not positive)."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(hours=hours if hours > 0 else 4)
    payload = {"id": str(user_id), "isAdmin": bool(is_admin), "iss": ISSUER,
               "exp": int(expires.timestamp()), "iat": int(now.timestamp())}
    try:
        return jwt.encode(payload, secret, algorithm="HS256")
    except (TypeError, jwt.PyJWTError) as exc:
        raise TokenError(f"Failed to sign token: {exc}") from exc


def _time(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TokenError("invalid token or claims")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def validate_token(token: str, secret: str) -> Claims:
    """Verify an HMAC-signed token and return its claims."""
    try:
        algorithm = jwt.get_unverified_header(token).get("alg")
        if algorithm not in _HMAC:
            raise TokenError(f"failed to parse token: unexpected signing method: {algorithm}")
        payload = jwt.decode(token, secret, algorithms=_HMAC,
                             options={"verify_iat": False, "verify_aud": False})
    except jwt.PyJWTError as exc:
        raise TokenError(f"failed to parse token: {exc}") from exc

    user_id, is_admin, issuer = payload.get("id", ""), payload.get("isAdmin", False), payload.get("iss")
    if not (isinstance(user_id, str) and isinstance(is_admin, bool)
            and (issuer is None or isinstance(issuer, str))):
        raise TokenError("invalid token or claims")
    claims = Claims(user_id, is_admin, issuer, _time(payload.get("iat")), _time(payload.get("exp")))
    if claims.expires_at is not None and claims.expires_at < datetime.now(timezone.utc):
        raise TokenError("token expired")
    return claims