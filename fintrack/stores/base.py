"""Storage contracts for identities and transaction records."""
from typing import Any, Protocol

from fintrack.schemas.auth import UserIdentity
from fintrack.schemas.transaction import TransactionRecord


class CredentialStore(Protocol):
    """Persists user identities."""

    async def get_by_id(self, user_id: str) -> UserIdentity | None: ...

    async def get_by_email(self, email: str) -> UserIdentity | None: ...

    async def create(self, email: str, hashed_password: str) -> UserIdentity:
        """
        Persist a new identity.

        Raises:
            DuplicateEmailError: if the email is already taken
            StoreUnavailableError: if the store cannot be reached
        """
        ...


class RecordStore(Protocol):
    """
    Durable storage for transaction records.

    Every keyed method filters on both the record id and the owner id inside
    the storage query, so a record owned by someone else is never loaded.
    """

    async def insert(self, values: dict[str, Any]) -> TransactionRecord: ...

    async def list_for_owner(self, user_id: str) -> list[TransactionRecord]: ...

    async def get_owned(
        self, transaction_id: int, user_id: str
    ) -> TransactionRecord | None: ...

    async def update_owned(
        self, transaction_id: int, user_id: str, values: dict[str, Any]
    ) -> bool: ...

    async def delete_owned(self, transaction_id: int, user_id: str) -> bool: ...
