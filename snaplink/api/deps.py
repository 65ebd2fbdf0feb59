"""
Request Identity Dependencies

The caller's identity comes from the auth cookie or, failing that, the
Authorization header (with or without a "Bearer " prefix).

- get_optional_user_id: anonymous is fine; a bad token, or one naming a
  deleted user, counts as anonymous
- get_current_user_id: a valid token for an existing user is required (401
  otherwise)
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.exceptions import UnauthorizedError
from snaplink.core.security import decode_access_token, strip_bearer
from snaplink.core.setting import settings
from snaplink.db.session import get_session
from snaplink.services.auth_service import AuthService

logger = logging.getLogger(__name__)


def extract_token(request: Request) -> Optional[str]:
    raw = request.cookies.get(settings.AUTH_COOKIE_NAME) or request.headers.get("Authorization")
    return strip_bearer(raw)


async def get_optional_user_id(
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> Optional[int]:
    token = extract_token(request)
    if token is None:
        return None
    try:
        user_id = decode_access_token(token)
    except UnauthorizedError:
        logger.debug("Ignoring invalid token on optional-auth route")
        return None
    if not await AuthService(session).user_exists(user_id):
        logger.debug(f"Ignoring token for unknown user {user_id} on optional-auth route")
        return None
    return user_id


async def get_current_user_id(
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> int:
    token = extract_token(request)
    if token is None:
        raise UnauthorizedError()
    user_id = decode_access_token(token)
    if not await AuthService(session).user_exists(user_id):
        raise UnauthorizedError("Token is not valid.")
    return user_id
