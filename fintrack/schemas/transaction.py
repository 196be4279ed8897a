from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from fintrack.schemas.auth import UserResponse

DESCRIPTION_MAX_LENGTH = 255

# Ids are stored in 32-bit INTEGER columns
MAX_ID = 2**31 - 1


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionCreate(BaseModel):
    """
    Schema for creating a transaction.

    Amounts are signed: negative for an expense, positive for income.
    Account and category ids are opaque; only their range is checked.
    """

    account_id: int = Field(ge=1, le=MAX_ID)
    category_id: int | None = Field(default=None, ge=1, le=MAX_ID)
    description: str = ""
    amount: Decimal = Field(max_digits=18, decimal_places=2)
    transaction_date: datetime

    @field_validator("description", mode="before")
    def validate_description(cls, v):
        if v is None:
            return ""
        if isinstance(v, str):
            v = v.strip()
            if len(v) > DESCRIPTION_MAX_LENGTH:
                raise ValueError(
                    f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
                )
        return v

    @field_validator("transaction_date")
    def validate_transaction_date(cls, v):
        return as_utc(v)


class TransactionUpdate(TransactionCreate):
    """Full replacement of a transaction's mutable fields."""


class TransactionRecord(BaseModel):
    """A stored transaction as returned by the ledger."""

    model_config = {"from_attributes": True}

    id: int
    user_id: str
    account_id: int
    category_id: int | None = None
    description: str
    amount: Decimal
    transaction_date: datetime
    created_at: datetime | None = None

    # SQLite hands back naive values; Postgres hands back the session time zone
    @field_validator("transaction_date", "created_at")
    def normalize_timestamps(cls, v):
        return as_utc(v) if v is not None else v


class TransactionListResponse(BaseModel):
    """All transactions owned by the caller."""

    items: list[TransactionRecord]
    total: int


class DashboardResponse(BaseModel):
    """Landing view after login."""

    user: UserResponse
    recent_transactions: list[TransactionRecord]
