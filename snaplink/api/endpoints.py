"""
FastAPI Endpoints for URL Shortening and Redirects

This module defines the public REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Rate limiting
- Delegating to service layer
- Choosing HTTP status codes

Errors are raised as service exceptions and turned into JSON by the
handlers registered in snaplink.main.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from snaplink.api.deps import get_optional_user_id
from snaplink.api.schemas import LinkOut, LinkResponse, QRCodeResponse, ShortenRequest
from snaplink.core.exceptions import ShortCodeNotFoundError
from snaplink.core.rate_limit import RATE_LIMITS, limiter
from snaplink.core.validators import sanitize_short_code
from snaplink.db.session import get_session
from snaplink.services.qr_service import generate_qr_data_url
from snaplink.services.redirect_service import RedirectService
from snaplink.services.url_service import URLShorteningService

router = APIRouter()


@router.post(
    "/api/shorten",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description=(
        "Takes a long URL and returns a shortened version with a unique code. "
        "Returns 200 with the existing link if the URL was already shortened."
    )
)
@limiter.limit(RATE_LIMITS["shorten"])
async def create_short_url(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    response: Response,
    body: ShortenRequest,
    session: AsyncSession = Depends(get_session),
    user_id: Optional[int] = Depends(get_optional_user_id)
) -> LinkResponse:
    url_service = URLShorteningService(session)
    link, created = await url_service.shorten(body.long_url, owner_id=user_id)

    if not created:
        response.status_code = status.HTTP_200_OK

    return LinkResponse(data=LinkOut.model_validate(link))


@router.get(
    "/s/{short_code}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    summary="Redirect to original URL",
    description="Takes a short code, counts the click and redirects to the original long URL"
)
@limiter.limit(RATE_LIMITS["redirect"])
async def redirect_to_url(
    short_code: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short code.

    Returns:
        RedirectResponse (HTTP 301) to original URL

    Raises:
        ShortCodeNotFoundError: 404 JSON body, never a redirect
    """
    redirect_service = RedirectService(session)
    destination_url = await redirect_service.resolve(short_code)

    return RedirectResponse(
        url=destination_url,
        status_code=status.HTTP_301_MOVED_PERMANENTLY
    )


@router.get(
    "/api/qrcode/{short_code}",
    response_model=QRCodeResponse,
    summary="QR code for a short URL",
    description="Returns a PNG QR code (base64 data URL) that encodes the short URL"
)
@limiter.limit(RATE_LIMITS["qrcode"])
async def get_qr_code(
    short_code: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> QRCodeResponse:
    sanitized_code = sanitize_short_code(short_code)
    if not sanitized_code:
        raise ShortCodeNotFoundError(short_code)

    url_service = URLShorteningService(session)
    link = await url_service.get_by_code(sanitized_code)
    if link is None:
        raise ShortCodeNotFoundError(sanitized_code)

    qr_code = await run_in_threadpool(generate_qr_data_url, link.short_url)

    return QRCodeResponse(
        qr_code=qr_code,
        short_code=link.short_code,
        short_url=link.short_url,
        original_url=link.destination_url,
    )
