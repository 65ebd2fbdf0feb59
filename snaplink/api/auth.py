"""
Authentication Endpoints

POST /api/auth/register creates an account; POST /api/auth/login returns an
access token and also sets it as an HttpOnly cookie, so browser clients are
authenticated without touching the token.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.api.schemas import LoginRequest, RegisterRequest, TokenResponse, UserOut, UserResponse
from snaplink.core.rate_limit import RATE_LIMITS, limiter
from snaplink.core.setting import settings
from snaplink.db.session import get_session
from snaplink.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user"
)
@limiter.limit(RATE_LIMITS["auth"])
async def register(
    request: Request,
    body: RegisterRequest,
    session: AsyncSession = Depends(get_session)
) -> UserResponse:
    user = await AuthService(session).register(body.name, body.email, body.password)
    return UserResponse(message="New user created.", data=UserOut.model_validate(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in and receive an access token"
)
@limiter.limit(RATE_LIMITS["auth"])
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    session: AsyncSession = Depends(get_session)
) -> TokenResponse:
    token = await AuthService(session).authenticate(body.email, body.password)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return TokenResponse(token=token)
