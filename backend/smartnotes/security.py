"""
SmartNotesX Backend — Password Hashing & Access Tokens
========================================================

What:  argon2 password hashing (passlib) and HS256 JWT issue/verify
       (python-jose).
How:   Tokens carry `sub` (user id), `role` and `exp`. Verification failures
       of any kind surface as AuthError; the caller never learns which check
       failed.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from smartnotes.config import Settings
from smartnotes.exceptions import AuthError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    settings: Settings,
    user_id: uuid.UUID,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    claims = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(settings: Settings, token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, returning the claims.

    Raises:
        AuthError: bad signature, expired, malformed, or no usable subject
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.debug("Rejected token: %s", e)
        raise AuthError(context={"reason": type(e).__name__})

    subject = claims.get("sub")
    try:
        claims["sub"] = uuid.UUID(str(subject))
    except ValueError:
        raise AuthError(context={"reason": "invalid_subject"})
    return claims
