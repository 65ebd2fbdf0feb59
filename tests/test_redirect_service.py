"""Tests for resolving short codes and counting clicks."""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from snaplink.core.exceptions import DatabaseError, ShortCodeNotFoundError
from snaplink.services.link_store import LinkStore
from snaplink.services.redirect_service import RedirectService
from snaplink.services.url_service import URLShorteningService


async def clicks_for(session_maker, short_code: str) -> int:
    async with session_maker() as session:
        link = await LinkStore(session).find_by_code(short_code)
        return link.clicks


@pytest.mark.asyncio
async def test_resolve_returns_destination_and_counts_click(session_maker):
    async with session_maker() as session:
        link, _ = await URLShorteningService(session).shorten("https://example.com/a/very/long/path")
        code = link.short_code

    async with session_maker() as session:
        destination = await RedirectService(session).resolve(code)

    assert destination == "https://example.com/a/very/long/path"
    assert await clicks_for(session_maker, code) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["Xy12aB34Cd", "nope", "../../etc/passwd", "with space", ""])
async def test_unknown_code_is_not_found(session, code):
    with pytest.raises(ShortCodeNotFoundError):
        await RedirectService(session).resolve(code)


@pytest.mark.asyncio
async def test_sequential_resolutions_add_up(session_maker):
    async with session_maker() as session:
        link, _ = await URLShorteningService(session).shorten("https://example.com/seq")
        code = link.short_code

    for _ in range(5):
        async with session_maker() as session:
            await RedirectService(session).resolve(code)

    assert await clicks_for(session_maker, code) == 5


@pytest.mark.asyncio
async def test_concurrent_resolutions_lose_no_clicks(session_maker):
    async with session_maker() as session:
        link, _ = await URLShorteningService(session).shorten("https://example.com/hot")
        code = link.short_code

    async def resolve_once():
        async with session_maker() as session:
            return await RedirectService(session).resolve(code)

    destinations = await asyncio.gather(*(resolve_once() for _ in range(100)))

    assert set(destinations) == {"https://example.com/hot"}
    assert await clicks_for(session_maker, code) == 100


@pytest.mark.asyncio
async def test_failed_increment_still_redirects(session_maker, monkeypatch, caplog):
    async with session_maker() as session:
        link, _ = await URLShorteningService(session).shorten("https://example.com/flaky")
        code = link.short_code

    async def broken_increment(self, short_code):
        raise DatabaseError("disk full")

    monkeypatch.setattr(LinkStore, "increment_clicks", broken_increment)

    async with session_maker() as session:
        destination = await RedirectService(session).resolve(code)

    assert destination == "https://example.com/flaky"
    assert "Failed to increment clicks" in caplog.text
    monkeypatch.undo()
    assert await clicks_for(session_maker, code) == 0


@pytest.mark.asyncio
async def test_failed_lookup_is_not_found(session_maker, monkeypatch, caplog):
    async with session_maker() as session:
        link, _ = await URLShorteningService(session).shorten("https://example.com/down")
        code = link.short_code

    async def broken_lookup(self, short_code):
        raise OperationalError("SELECT ...", {}, Exception("database is locked"))

    monkeypatch.setattr(LinkStore, "find_by_code", broken_lookup)

    async with session_maker() as session:
        with pytest.raises(ShortCodeNotFoundError):
            await RedirectService(session).resolve(code)

    assert "Lookup failed" in caplog.text
