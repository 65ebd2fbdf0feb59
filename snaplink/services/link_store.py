"""
Link Store

Persistence for Link records. Every other service reaches the links table
through this class, so the storage-level guarantees live in one place:

- Code uniqueness is enforced by the unique index on short_code. create()
  inserts and lets the database reject a duplicate; there is no
  check-then-insert window.
- Click counting is a single UPDATE ... SET clicks = clicks + 1, never a
  read-modify-write in Python, so concurrent redirects cannot lose counts.
- Owner-scoped mutations go through the ownership gate on every call.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.exceptions import (
    DatabaseError,
    DuplicateCodeError,
    InvalidInputError,
    LinkNotFoundError,
)
from snaplink.core.setting import settings
from snaplink.db.models import Link, utcnow
from snaplink.services.ownership import require_owner

logger = logging.getLogger(__name__)


class LinkStore:
    """
    Repository for the links table.

    Write methods commit before returning; a failed write is rolled back and
    re-raised as a DatabaseError subclass.
    """

    MUTABLE_FIELDS = frozenset({"destination_url"})

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_destination(self, destination_url: str) -> Optional[Link]:
        """Oldest link pointing at exactly ``destination_url``, if any."""
        statement = (
            select(Link)
            .where(Link.destination_url == destination_url)
            .order_by(Link.id)
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def find_by_code(self, short_code: str) -> Optional[Link]:
        statement = select(Link).where(Link.short_code == short_code)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def find_by_id(self, link_id: int) -> Optional[Link]:
        statement = select(Link).where(Link.id == link_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, link: Link) -> Link:
        """
        Insert a new link.

        Raises:
            DuplicateCodeError: If another link already holds link.short_code
            DatabaseError: For any other storage failure
        """
        self.session.add(link)
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self.find_by_code(link.short_code) is not None:
                raise DuplicateCodeError(link.short_code, original_error=e)
            raise DatabaseError(
                "failed to create link: constraint violation",
                original_error=e
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"failed to create link: {e}", original_error=e)

        await self.session.refresh(link)
        return link

    async def increment_clicks(self, short_code: str) -> None:
        """
        Add one click to ``short_code`` atomically and commit.

        The increment is evaluated by the database, so N concurrent calls
        always add exactly N.
        """
        statement = (
            update(Link)
            .where(Link.short_code == short_code)
            .values(clicks=Link.clicks + 1)
        )
        try:
            await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(
                f"failed to increment clicks for '{short_code}': {e}",
                original_error=e
            )

    async def update(self, link_id: int, patch: dict[str, Any], requester_id: Optional[int]) -> Link:
        """
        Apply ``patch`` to the link ``link_id`` on behalf of ``requester_id``.

        Only destination_url may change. The short code stays the same;
        short_url is rebuilt from the current BASE_URL.

        Raises:
            LinkNotFoundError: No link with this id
            ForbiddenError: requester_id is not the link's owner
            InvalidInputError: patch names an immutable field
        """
        link = await self.find_by_id(link_id)
        if link is None:
            raise LinkNotFoundError(link_id)

        require_owner(link, requester_id, action="update")

        immutable = set(patch) - self.MUTABLE_FIELDS
        if immutable:
            raise InvalidInputError(
                f"Field(s) cannot be changed: {', '.join(sorted(immutable))}."
            )

        for field, value in patch.items():
            setattr(link, field, value)
        link.short_url = settings.short_url_for(link.short_code)
        link.updated_at = utcnow()

        self.session.add(link)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"failed to update link {link_id}: {e}", original_error=e)

        await self.session.refresh(link)
        return link

    async def delete(self, link_id: int, requester_id: Optional[int]) -> None:
        """
        Delete the link ``link_id`` on behalf of ``requester_id``.

        Raises:
            LinkNotFoundError: No link with this id
            ForbiddenError: requester_id is not the link's owner
        """
        link = await self.find_by_id(link_id)
        if link is None:
            raise LinkNotFoundError(link_id)

        require_owner(link, requester_id, action="delete")
        short_code = link.short_code

        try:
            await self.session.delete(link)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"failed to delete link {link_id}: {e}", original_error=e)

        logger.info(f"Link {link_id} ({short_code}) deleted by user {requester_id}")

    async def list_by_owner(self, owner_id: int) -> list[Link]:
        """All links created by ``owner_id``, newest first."""
        statement = (
            select(Link)
            .where(Link.owner_id == owner_id)
            .order_by(Link.created_at.desc(), Link.id.desc())
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
