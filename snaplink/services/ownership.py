"""
Ownership Gate

Single authorization predicate for owner-scoped mutations (edit, delete).
Both paths call it on every request, so the rule cannot drift between them
and nothing is cached per session.
"""

from typing import Optional

from snaplink.core.exceptions import ForbiddenError
from snaplink.db.models import Link


def authorize(link: Link, requester_id: Optional[int]) -> bool:
    """
    Decide whether ``requester_id`` may mutate ``link``.

    - Unowned links are never mutable through owner-scoped paths
    - Owned links are mutable only by exactly their owner
    - A missing requester is always denied
    """
    if link.owner_id is None or requester_id is None:
        return False
    return link.owner_id == requester_id


def require_owner(link: Link, requester_id: Optional[int], action: str = "modify") -> None:
    """
    Raise ForbiddenError unless :func:`authorize` allows the mutation.

    Args:
        link: The stored link
        requester_id: Authenticated user id, or None
        action: Verb used in the error message ("update", "delete", ...)
    """
    if not authorize(link, requester_id):
        raise ForbiddenError(f"You are not authorized to {action} this URL.")
