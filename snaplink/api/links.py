"""
Link Management Endpoints

Owner-scoped operations behind /api/links. Every route requires a valid
token; update and delete are additionally restricted to the link's owner.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.api.deps import get_current_user_id
from snaplink.api.schemas import LinkListResponse, LinkOut, LinkResponse, MessageResponse, UpdateLinkRequest
from snaplink.core.exceptions import LinkNotFoundError
from snaplink.db.session import get_session
from snaplink.services.link_store import LinkStore
from snaplink.services.url_service import URLShorteningService

router = APIRouter()


def parse_link_id(link_id: str) -> int:
    """Link ids are positive integers that fit a 64-bit column; anything else names no link."""
    if not (link_id.isascii() and link_id.isdigit()) or len(link_id) > 18:
        raise LinkNotFoundError(link_id)
    return int(link_id)


@router.get("/my-links", response_model=LinkListResponse, summary="List my links")
async def get_my_links(
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id)
) -> LinkListResponse:
    links = await LinkStore(session).list_by_owner(user_id)
    return LinkListResponse(
        count=len(links),
        data=[LinkOut.model_validate(link) for link in links]
    )


@router.put("/{link_id}", response_model=LinkResponse, summary="Change a link's destination")
async def update_link(
    link_id: str,
    body: UpdateLinkRequest,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id)
) -> LinkResponse:
    link = await URLShorteningService(session).update_destination(
        parse_link_id(link_id), body.original_url, user_id
    )
    return LinkResponse(message="URL updated successfully.", data=LinkOut.model_validate(link))


@router.delete("/{link_id}", response_model=MessageResponse, summary="Delete a link")
async def delete_link(
    link_id: str,
    session: AsyncSession = Depends(get_session),
    user_id: int = Depends(get_current_user_id)
) -> MessageResponse:
    await LinkStore(session).delete(parse_link_id(link_id), user_id)
    return MessageResponse(message="URL deleted successfully.")
