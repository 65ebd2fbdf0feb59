"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Validating submitted destination URLs
- Returning the existing link when a destination was already shortened
- Minting random short codes and retrying on the rare collision
- Attributing new links to the caller when one is authenticated

Design Decisions:
- Random codes over sequential ids: codes reveal nothing about volume and
  cannot be enumerated
- Uniqueness is the database's job; a rejected insert just means "draw again",
  in a bounded loop so a broken store fails cleanly instead of spinning
- Deduplication is by exact destination string and global (not per user)
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.exceptions import (
    DuplicateCodeError,
    InvalidInputError,
    InvalidURLError,
    StorageExhaustedError,
)
from snaplink.core.setting import settings
from snaplink.core.validators import is_blank, is_valid_scheme, validate_url_length
from snaplink.db.models import Link
from snaplink.services import code_generator
from snaplink.services.link_store import LinkStore

logger = logging.getLogger(__name__)


def is_valid_url(url: str) -> bool:
    """
    Validate that ``url`` is a well-formed absolute URI.

    Checks that the URL has a scheme and an authority (host), uses one of the
    allowed schemes and contains no whitespace. Bare hostnames such as
    "example.com" have no scheme and are rejected.

    Args:
        url: The URL string to validate

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if not validate_url_length(url, settings.MAX_URL_LENGTH):
        return False

    if any(char.isspace() for char in url):
        return False

    try:
        result = urlsplit(url)
        # Accessing .port validates it (raises ValueError when out of range)
        result.port
    except ValueError:
        return False

    if not is_valid_scheme(result.scheme) or not result.netloc or not result.hostname:
        return False

    allowed_schemes = {scheme.lower() for scheme in settings.ALLOWED_URL_SCHEMES}
    return result.scheme.lower() in allowed_schemes


def validate_destination(destination_url: Optional[str]) -> str:
    """
    Check a submitted destination and return it stripped of surrounding space.

    Raises:
        InvalidInputError: If the URL is missing or blank
        InvalidURLError: If the URL is not a well-formed absolute URI
    """
    if is_blank(destination_url):
        raise InvalidInputError("Please provide a URL.")

    destination_url = destination_url.strip()
    if not is_valid_url(destination_url):
        raise InvalidURLError(destination_url)
    return destination_url


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Holds no state between requests: every call reads and writes through
    the LinkStore bound to the request's session.
    """

    def __init__(self, session: AsyncSession, max_retries: Optional[int] = None):
        """
        Initialize the URL shortening service.

        Args:
            session: Database session
            max_retries: Insert attempts before StorageExhaustedError
                (defaults to settings.SHORT_CODE_MAX_RETRIES)
        """
        self.session = session
        self.store = LinkStore(session)
        self.max_retries = max_retries or settings.SHORT_CODE_MAX_RETRIES

    async def shorten(self, destination_url: Optional[str], owner_id: Optional[int] = None) -> tuple[Link, bool]:
        """
        Create a short link for ``destination_url`` or return the existing one.

        Args:
            destination_url: The long URL to shorten
            owner_id: Authenticated caller, or None for anonymous submissions

        Returns:
            (link, created): created is False when the destination had
            already been shortened and the stored link is returned unchanged

        Raises:
            InvalidInputError: If the URL is missing
            InvalidURLError: If URL format is invalid
            StorageExhaustedError: If every generated code collided
            DatabaseError: If database operation fails
        """
        destination_url = validate_destination(destination_url)

        existing = await self.store.find_by_destination(destination_url)
        if existing is not None:
            return existing, False

        for attempt in range(1, self.max_retries + 1):
            short_code = code_generator.generate()
            link = Link(
                short_code=short_code,
                destination_url=destination_url,
                short_url=settings.short_url_for(short_code),
                clicks=0,
                owner_id=owner_id,
            )
            try:
                link = await self.store.create(link)
            except DuplicateCodeError:
                logger.warning(
                    f"Short code collision on attempt {attempt}/{self.max_retries}, regenerating"
                )
                # A concurrent request may have just shortened the same URL.
                existing = await self.store.find_by_destination(destination_url)
                if existing is not None:
                    return existing, False
                continue

            logger.info(
                f"Created link {link.short_code} -> {link.destination_url} "
                f"owner={owner_id if owner_id is not None else 'anonymous'}"
            )
            return link, True

        logger.error(f"Gave up allocating a short code after {self.max_retries} attempts")
        raise StorageExhaustedError(self.max_retries)

    async def update_destination(self, link_id: int, destination_url: Optional[str], requester_id: Optional[int]) -> Link:
        """
        Point an owned link at a new destination. The short code is kept.

        Raises:
            InvalidInputError / InvalidURLError: Bad new destination
            LinkNotFoundError: No such link
            ForbiddenError: requester_id does not own the link
        """
        destination_url = validate_destination(destination_url)
        link = await self.store.update(link_id, {"destination_url": destination_url}, requester_id)
        logger.info(f"Link {link_id} ({link.short_code}) now points to {destination_url}")
        return link

    async def get_by_code(self, short_code: str) -> Optional[Link]:
        """
        Retrieve the link for a given short code.

        Returns:
            Link object if found, None otherwise
        """
        return await self.store.find_by_code(short_code)
