"""
Authentication Service

Registers accounts and exchanges credentials for access tokens. Token
mechanics live in snaplink.core.security; this layer owns the users table.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.core.exceptions import (
    DatabaseError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidInputError,
)
from snaplink.core.security import create_access_token, hash_password, verify_password
from snaplink.core.validators import is_blank
from snaplink.db.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == normalize_email(email))
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def user_exists(self, user_id: int) -> bool:
        """Whether a token subject still names an account (users can be deleted)."""
        result = await self.session.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
        """
        Create a new account.

        Raises:
            InvalidInputError: If name, email or password is missing
            EmailAlreadyRegisteredError: If the email already has an account
            DatabaseError: If the insert fails for another reason
        """
        if is_blank(name) or is_blank(email) or is_blank(password):
            raise InvalidInputError("Please provide name, email and password.")

        email = normalize_email(email)
        if await self.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError(email)

        user = User(
            name=name.strip(),
            email=email,
            password_hash=hash_password(password),
        )
        self.session.add(user)
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.session.rollback()
            raise EmailAlreadyRegisteredError(email)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"failed to create user: {e}", original_error=e)

        await self.session.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> str:
        """
        Check credentials and issue an access token.

        Raises:
            InvalidInputError: If email or password is missing
            InvalidCredentialsError: Unknown email or wrong password
        """
        if is_blank(email) or is_blank(password):
            raise InvalidInputError("Please provide email and password.")

        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return create_access_token(user.id)
