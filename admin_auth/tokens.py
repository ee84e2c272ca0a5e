"""Signed, time-limited admin tokens (HS256 JWT)."""

import time
from dataclasses import dataclass
from typing import Optional

import jwt
from django.conf import settings

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    username: str


def generate_token(payload: TokenPayload, ttl_seconds: Optional[int] = None) -> str:
    now = int(time.time())
    ttl = settings.JWT_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    claims = {
        "userId": payload.user_id,
        "username": payload.username,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[TokenPayload]:
    """Return the payload of a valid token, None for anything invalid or expired."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None
    user_id = claims.get("userId")
    username = claims.get("username")
    if not isinstance(user_id, str) or not isinstance(username, str):
        return None
    return TokenPayload(user_id=user_id, username=username)
