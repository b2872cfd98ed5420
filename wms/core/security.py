"""Machine-client credentials: static API keys and signed bearer JWTs.

Browser users authenticate through the session cookie instead (see
``wms.core.session_auth``); both paths resolve to the same principal dict,
``{"auth_type": ..., "user_id": ...}``, which routers use to stamp
``created_by`` and ``updated_by``.
"""

from __future__ import annotations

import hmac
from typing import Optional

import jwt
from fastapi import HTTPException, status

from wms.config import get_settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def configured_api_keys() -> tuple[str, ...]:
    raw = get_settings().API_KEYS or ""
    return tuple(key.strip() for key in raw.split(",") if key.strip())


def api_key_matches(candidate: str) -> bool:
    return any(hmac.compare_digest(candidate, key) for key in configured_api_keys())


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise _unauthorized("JWT auth is not configured")
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
    except jwt.PyJWTError as exc:
        raise _unauthorized("Invalid JWT") from exc


def authenticate_request(api_key: Optional[str], authorization: Optional[str]) -> Optional[dict]:
    """Principal for the presented credentials, or None when none were sent.

    A wrong API key or a bad token is a 401, never a fall-through.
    """
    if api_key:
        if not api_key_matches(api_key):
            raise _unauthorized("Invalid API key")
        return {"auth_type": "api_key", "user_id": None}

    token = bearer_token(authorization)
    if token is None:
        return None
    claims = decode_access_token(token)
    # Tokens minted for a dashboard user carry its id as ``uid``.
    return {"auth_type": "jwt", "user_id": claims.get("uid"), "payload": claims}
