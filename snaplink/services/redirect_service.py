"""
Redirect Service

This service handles URL redirection logic: resolve a short code to its
destination and count the click.

Design Decisions:
- The click increment is awaited inside the request, before the redirect is
  returned; it is never handed to a background task that may not run
- A failed lookup is logged and answered as not found, never as a 500
- Click tracking is best effort: if the increment fails the failure is logged
  and the visitor is still redirected
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.exceptions import DatabaseError, ShortCodeNotFoundError
from snaplink.core.validators import sanitize_short_code
from snaplink.services.link_store import LinkStore

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Service for handling URL redirections.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the redirect service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session
        self.store = LinkStore(session)

    async def resolve(self, short_code: str) -> str:
        """
        Resolve ``short_code`` to its destination URL and record one click.

        Args:
            short_code: The code from the public short URL

        Returns:
            The destination URL to redirect to

        Raises:
            ShortCodeNotFoundError: If no link has this code (including
                codes that could never have been issued, and lookups the
                database failed to answer)
        """
        sanitized = sanitize_short_code(short_code)
        if sanitized is None:
            raise ShortCodeNotFoundError(short_code)

        try:
            link = await self.store.find_by_code(sanitized)
        except SQLAlchemyError as e:
            logger.error(f"Lookup failed for {sanitized}: {e}", exc_info=True)
            raise ShortCodeNotFoundError(sanitized)

        if link is None:
            raise ShortCodeNotFoundError(sanitized)

        destination_url = link.destination_url

        try:
            await self.store.increment_clicks(sanitized)
        except DatabaseError as e:
            logger.error(
                f"Failed to increment clicks for {sanitized}: {e}",
                exc_info=True
            )

        return destination_url
