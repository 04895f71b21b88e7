# app/domains/user/service.py
import logging
import uuid
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password, verify_password
from app.exceptions.base import PersistenceError
from app.exceptions.user import InvalidCredentialsError, UserAlreadyExistsError
from models import User
from models.base import utcnow

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create_user(self, name: str, email: str, password: str) -> User:
        """Create a new user with a hashed password.

        Raises:
            UserAlreadyExistsError: If the email is already registered.
        """
        if await self.get_user_by_email(email):
            raise UserAlreadyExistsError()

        now = utcnow()
        user = User(
            id=uuid.uuid4(),
            name=name,
            email=email.lower(),
            password=hash_password(password),
            is_active=True,
            created_at=now,
            updated_at=now,
        )

        try:
            self.db.add(user)
            await self.db.commit()
            return user
        except IntegrityError as e:
            await self.db.rollback()
            raise UserAlreadyExistsError() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Failed to create user: %s", str(e))
            raise PersistenceError("Failed to create user") from e

    async def authenticate(self, email: str, password: str) -> User:
        """Check credentials and return the matching user.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong.
        """
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.password):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise InvalidCredentialsError("User account is inactive")
        return user
