"""Tests for password hashing, tokens and the auth service."""

from datetime import timedelta

import pytest

from snaplink.core.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidInputError,
    UnauthorizedError,
)
from snaplink.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    strip_bearer,
    verify_password,
)
from snaplink.services.auth_service import AuthService


def test_password_hash_is_salted_and_verifiable():
    first = hash_password("secret123")
    second = hash_password("secret123")

    assert first != second
    assert "secret123" not in first
    assert verify_password("secret123", first)
    assert not verify_password("wrong", first)


def test_token_roundtrip():
    assert decode_access_token(create_access_token(42)) == 42


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_delta=timedelta(seconds=-5))
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(UnauthorizedError):
        decode_access_token("not.a.token")


def test_strip_bearer():
    assert strip_bearer("Bearer abc") == "abc"
    assert strip_bearer("abc") == "abc"
    assert strip_bearer("Bearer ") is None
    assert strip_bearer(None) is None


@pytest.mark.asyncio
async def test_register_and_authenticate(session):
    service = AuthService(session)

    user = await service.register("Alice", "Alice@Mail.com", "secret123")
    token = await service.authenticate("alice@mail.com", "secret123")

    assert user.email == "alice@mail.com"
    assert user.password_hash != "secret123"
    assert decode_access_token(token) == user.id


@pytest.mark.asyncio
async def test_register_duplicate_email(session):
    service = AuthService(session)
    await service.register("Alice", "alice@mail.com", "secret123")

    with pytest.raises(EmailAlreadyRegisteredError):
        await service.register("Other Alice", "ALICE@mail.com", "secret456")


@pytest.mark.asyncio
async def test_register_requires_all_fields(session):
    with pytest.raises(InvalidInputError):
        await AuthService(session).register("Alice", "", "secret123")


@pytest.mark.asyncio
async def test_authenticate_rejects_bad_credentials(session):
    service = AuthService(session)
    await service.register("Alice", "alice@mail.com", "secret123")

    with pytest.raises(InvalidCredentialsError):
        await service.authenticate("alice@mail.com", "wrong-password")
    with pytest.raises(InvalidCredentialsError):
        await service.authenticate("nobody@mail.com", "secret123")


@pytest.mark.asyncio
async def test_user_exists(session, make_user):
    user_id = await make_user("alice@mail.com")
    service = AuthService(session)

    assert await service.user_exists(user_id)
    assert not await service.user_exists(4242)
