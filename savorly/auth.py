"""Bearer token verification for the identity provider's JWTs."""

import logging

import jwt
from fastapi import Header

from .config import get_settings
from .errors import AuthError

logger = logging.getLogger(__name__)

settings = get_settings()


def decode_user_id(token: str) -> str:
    """Verify a bearer token and return its `uid` claim.

    Raises:
        AuthError: 403 if the token is invalid, expired or has no uid.
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise AuthError("Invalid token.", status_code=403) from e

    uid = claims.get("uid")
    if not uid or not isinstance(uid, str):
        raise AuthError("Invalid token.", status_code=403)
    return uid


def get_current_user_id(authorization: str | None = Header(default=None)) -> str:
    """FastAPI dependency resolving `Authorization: Bearer <jwt>` to a user id."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Access denied. No token provided.", status_code=401)
    return decode_user_id(token.strip())
