"""Tests for LinkStore: uniqueness, atomic clicks and owner-scoped mutations."""

import asyncio

import pytest

from snaplink.core.exceptions import (
    DuplicateCodeError,
    ForbiddenError,
    InvalidInputError,
    LinkNotFoundError,
)
from snaplink.core.setting import settings
from snaplink.db.models import Link
from snaplink.services.link_store import LinkStore


def new_link(code: str, destination: str, owner_id=None) -> Link:
    return Link(
        short_code=code,
        destination_url=destination,
        short_url=settings.short_url_for(code),
        owner_id=owner_id,
    )


@pytest.mark.asyncio
async def test_create_and_find(session):
    store = LinkStore(session)

    link = await store.create(new_link("abcdefghij", "https://example.com/x"))

    assert link.id is not None
    assert link.clicks == 0
    assert (await store.find_by_code("abcdefghij")).id == link.id
    assert (await store.find_by_id(link.id)).short_code == "abcdefghij"
    assert (await store.find_by_destination("https://example.com/x")).id == link.id
    assert await store.find_by_code("missing000") is None
    assert await store.find_by_destination("https://example.com/other") is None


@pytest.mark.asyncio
async def test_duplicate_code_is_rejected_by_database(session):
    store = LinkStore(session)
    await store.create(new_link("abcdefghij", "https://example.com/x"))

    with pytest.raises(DuplicateCodeError) as exc_info:
        await store.create(new_link("abcdefghij", "https://example.com/y"))

    assert exc_info.value.short_code == "abcdefghij"
    assert await store.find_by_destination("https://example.com/y") is None


@pytest.mark.asyncio
async def test_increment_clicks(session):
    store = LinkStore(session)
    await store.create(new_link("abcdefghij", "https://example.com/x"))

    for _ in range(3):
        await store.increment_clicks("abcdefghij")

    session.expire_all()
    assert (await store.find_by_code("abcdefghij")).clicks == 3


@pytest.mark.asyncio
async def test_concurrent_increments_are_not_lost(session_maker):
    async with session_maker() as session:
        await LinkStore(session).create(new_link("abcdefghij", "https://example.com/x"))

    async def click():
        async with session_maker() as session:
            await LinkStore(session).increment_clicks("abcdefghij")

    await asyncio.gather(*(click() for _ in range(50)))

    async with session_maker() as session:
        assert (await LinkStore(session).find_by_code("abcdefghij")).clicks == 50


@pytest.mark.asyncio
async def test_update_by_owner(session, make_user):
    alice = await make_user("alice@mail.com")
    store = LinkStore(session)
    link = await store.create(new_link("abcdefghij", "https://example.com/x", owner_id=alice))

    updated = await store.update(link.id, {"destination_url": "https://example.com/y"}, alice)

    assert updated.destination_url == "https://example.com/y"
    assert updated.short_code == "abcdefghij"
    assert updated.short_url == "http://sl.test/s/abcdefghij"


@pytest.mark.asyncio
async def test_update_rejects_immutable_fields(session, make_user):
    alice = await make_user("alice@mail.com")
    store = LinkStore(session)
    link = await store.create(new_link("abcdefghij", "https://example.com/x", owner_id=alice))

    with pytest.raises(InvalidInputError):
        await store.update(link.id, {"short_code": "zzzzzzzzzz"}, alice)
    with pytest.raises(InvalidInputError):
        await store.update(link.id, {"clicks": 0}, alice)


@pytest.mark.asyncio
async def test_update_and_delete_by_other_user_are_forbidden(session, make_user):
    alice = await make_user("alice@mail.com")
    bob = await make_user("bob@mail.com")
    store = LinkStore(session)
    link = await store.create(new_link("abcdefghij", "https://example.com/x", owner_id=alice))
    link_id = link.id

    with pytest.raises(ForbiddenError):
        await store.update(link_id, {"destination_url": "https://evil.example.com"}, bob)
    with pytest.raises(ForbiddenError):
        await store.delete(link_id, bob)

    session.expire_all()
    stored = await store.find_by_id(link_id)
    assert stored is not None
    assert stored.destination_url == "https://example.com/x"
    assert stored.owner_id == alice


@pytest.mark.asyncio
async def test_unowned_link_cannot_be_mutated(session, make_user):
    alice = await make_user("alice@mail.com")
    store = LinkStore(session)
    link = await store.create(new_link("abcdefghij", "https://example.com/x"))

    with pytest.raises(ForbiddenError):
        await store.update(link.id, {"destination_url": "https://example.com/y"}, alice)
    with pytest.raises(ForbiddenError):
        await store.delete(link.id, alice)
    with pytest.raises(ForbiddenError):
        await store.delete(link.id, None)


@pytest.mark.asyncio
async def test_missing_link(session, make_user):
    alice = await make_user("alice@mail.com")
    store = LinkStore(session)

    with pytest.raises(LinkNotFoundError):
        await store.update(999, {"destination_url": "https://example.com/y"}, alice)
    with pytest.raises(LinkNotFoundError):
        await store.delete(999, alice)


@pytest.mark.asyncio
async def test_delete_by_owner(session, make_user):
    alice = await make_user("alice@mail.com")
    store = LinkStore(session)
    link = await store.create(new_link("abcdefghij", "https://example.com/x", owner_id=alice))

    await store.delete(link.id, alice)

    assert await store.find_by_code("abcdefghij") is None


@pytest.mark.asyncio
async def test_list_by_owner_newest_first(session, make_user):
    alice = await make_user("alice@mail.com")
    bob = await make_user("bob@mail.com")
    store = LinkStore(session)
    await store.create(new_link("aaaaaaaaaa", "https://example.com/1", owner_id=alice))
    await store.create(new_link("bbbbbbbbbb", "https://example.com/2", owner_id=bob))
    await store.create(new_link("cccccccccc", "https://example.com/3", owner_id=alice))
    await store.create(new_link("dddddddddd", "https://example.com/4"))

    links = await store.list_by_owner(alice)

    assert [link.short_code for link in links] == ["cccccccccc", "aaaaaaaaaa"]
    assert await store.list_by_owner(12345) == []
