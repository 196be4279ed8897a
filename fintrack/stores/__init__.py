import functools

from sqlalchemy.exc import SQLAlchemyError

from fintrack.core.exceptions import StoreUnavailableError


def translate_store_errors(func):
    """
    Roll back and re-raise SQLAlchemy failures as StoreUnavailableError.

    Wrapped methods belong to objects holding an AsyncSession as `self.db`.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreUnavailableError(f"{func.__qualname__} failed: {e}") from e

    return wrapper
