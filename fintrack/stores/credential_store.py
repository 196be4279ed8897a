from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.exceptions import DuplicateEmailError
from fintrack.models.user import User
from fintrack.schemas.auth import UserIdentity
from fintrack.stores import translate_store_errors


class SqlCredentialStore:
    """CredentialStore on the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @translate_store_errors
    async def get_by_id(self, user_id: str) -> UserIdentity | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        return UserIdentity.model_validate(user) if user else None

    @translate_store_errors
    async def get_by_email(self, email: str) -> UserIdentity | None:
        result = await self.db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        return UserIdentity.model_validate(user) if user else None

    @translate_store_errors
    async def create(self, email: str, hashed_password: str) -> UserIdentity:
        new_user = User(email=email, hashed_password=hashed_password)
        self.db.add(new_user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Unique constraint on email fired between lookup and insert
            await self.db.rollback()
            raise DuplicateEmailError(email) from e
        await self.db.refresh(new_user)
        return UserIdentity.model_validate(new_user)
