"""
Password Hashing and Access Tokens

- Passwords are hashed with passlib's CryptContext (salted PBKDF2-SHA256);
  the plain password is never stored or logged
- Access tokens are HS256 JWTs (python-jose) whose ``sub`` claim is the
  user id and whose ``exp`` claim bounds the session lifetime
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from snaplink.core.exceptions import UnauthorizedError
from snaplink.core.setting import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

BEARER_SCHEME = "bearer"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify ``token`` and return the user id it was issued for.

    Raises:
        UnauthorizedError: If the token is malformed, tampered with or expired
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token verification failed: {e}")
        raise UnauthorizedError("Token is not valid.")

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Token is not valid.")


def strip_bearer(raw: Optional[str]) -> Optional[str]:
    """Return the token from a header/cookie value, with any 'Bearer ' prefix removed."""
    if not raw:
        return None
    raw = raw.strip()
    scheme, _, credentials = raw.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        raw = credentials.strip()
    return raw or None
