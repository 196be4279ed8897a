"""Owner-scoped create/read/update/delete over transaction records."""
from datetime import datetime, timezone

from fintrack.core.logging import app_logger
from fintrack.schemas.transaction import (
    TransactionCreate,
    TransactionRecord,
    TransactionUpdate,
)
from fintrack.stores.base import RecordStore

# Set once at creation, never written by an update
IMMUTABLE_FIELDS = {"id", "user_id", "created_at"}


class TransactionLedger:
    """
    Sole mutator of transaction records.

    Every operation takes the caller's resolved user id. Keyed operations on
    a record that does not exist and on a record owned by someone else give
    the same result (None or False), so a caller cannot probe for other
    users' records.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def add(self, record: TransactionCreate, user_id: str) -> TransactionRecord:
        values = record.model_dump()
        values["user_id"] = user_id
        values["created_at"] = datetime.now(timezone.utc)

        stored = await self.store.insert(values)
        app_logger.info(f"Transaction created: ID: {stored.id} - UserID: {user_id}")
        return stored

    async def list_all(self, user_id: str) -> list[TransactionRecord]:
        return await self.store.list_for_owner(user_id)

    async def get_by_id(self, transaction_id: int, user_id: str) -> TransactionRecord | None:
        return await self.store.get_owned(transaction_id, user_id)

    async def update(
        self, transaction_id: int, user_id: str, changes: TransactionUpdate
    ) -> TransactionRecord | None:
        """
        Replace the mutable fields of an owned transaction.

        Returns:
            TransactionRecord | None: the stored record after the update, or
            None if no record with this id belongs to user_id
        """
        values = changes.model_dump(exclude=IMMUTABLE_FIELDS)
        if not await self.store.update_owned(transaction_id, user_id, values):
            return None

        app_logger.info(f"Transaction updated: ID: {transaction_id} - UserID: {user_id}")
        return await self.store.get_owned(transaction_id, user_id)

    async def delete(self, transaction_id: int, user_id: str) -> bool:
        deleted = await self.store.delete_owned(transaction_id, user_id)
        if deleted:
            app_logger.info(f"Transaction deleted: ID: {transaction_id} - UserID: {user_id}")
        return deleted
