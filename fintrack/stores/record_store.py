from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.models.transaction import Transaction
from fintrack.schemas.transaction import TransactionRecord
from fintrack.stores import translate_store_errors


class SqlRecordStore:
    """RecordStore on the transactions table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @translate_store_errors
    async def insert(self, values: dict[str, Any]) -> TransactionRecord:
        new_transaction = Transaction(**values)
        self.db.add(new_transaction)
        await self.db.commit()
        await self.db.refresh(new_transaction)
        return TransactionRecord.model_validate(new_transaction)

    @translate_store_errors
    async def list_for_owner(self, user_id: str) -> list[TransactionRecord]:
        query = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.id)
        )
        result = await self.db.execute(query)
        return [TransactionRecord.model_validate(t) for t in result.scalars().all()]

    @translate_store_errors
    async def get_owned(
        self, transaction_id: int, user_id: str
    ) -> TransactionRecord | None:
        query = select(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.user_id == user_id,
        )
        result = await self.db.execute(query)
        transaction = result.scalar_one_or_none()
        return TransactionRecord.model_validate(transaction) if transaction else None

    @translate_store_errors
    async def update_owned(
        self, transaction_id: int, user_id: str, values: dict[str, Any]
    ) -> bool:
        statement = (
            update(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
            )
            .values(**values)
        )
        result = await self.db.execute(statement)
        await self.db.commit()
        return result.rowcount > 0

    @translate_store_errors
    async def delete_owned(self, transaction_id: int, user_id: str) -> bool:
        statement = (
            delete(Transaction)
            .where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
            )
        )
        result = await self.db.execute(statement)
        await self.db.commit()
        return result.rowcount > 0
