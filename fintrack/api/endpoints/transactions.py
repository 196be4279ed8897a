from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from fintrack.core.dependencies import get_current_user, get_ledger
from fintrack.schemas.auth import UserIdentity
from fintrack.schemas.transaction import (
    MAX_ID,
    TransactionCreate,
    TransactionListResponse,
    TransactionRecord,
    TransactionUpdate,
)
from fintrack.services.ledger import TransactionLedger

router = APIRouter()

NOT_FOUND_DETAIL = "Transaction not found"

TransactionId = Annotated[int, Path(ge=1, le=MAX_ID)]


def _not_found() -> HTTPException:
    # Same answer for a missing id and for another user's record
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)


@router.post(
    "/", response_model=TransactionRecord, status_code=status.HTTP_201_CREATED
)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: UserIdentity = Depends(get_current_user),
    ledger: TransactionLedger = Depends(get_ledger),
):
    """
    Create a new transaction for the authenticated user.

    - **account_id**: Account the transaction belongs to
    - **category_id**: Optional category
    - **description**: Free text, may be empty
    - **amount**: Signed amount with up to 2 decimal places (negative = expense)
    - **transaction_date**: When the transaction happened
    """
    return await ledger.add(transaction_data, current_user.id)


@router.get("/", response_model=TransactionListResponse)
async def list_transactions(
    current_user: UserIdentity = Depends(get_current_user),
    ledger: TransactionLedger = Depends(get_ledger),
):
    """List every transaction owned by the authenticated user, oldest id first."""
    transactions = await ledger.list_all(current_user.id)
    return TransactionListResponse(items=transactions, total=len(transactions))


@router.get("/{transaction_id}", response_model=TransactionRecord)
async def get_transaction(
    transaction_id: TransactionId,
    current_user: UserIdentity = Depends(get_current_user),
    ledger: TransactionLedger = Depends(get_ledger),
):
    transaction = await ledger.get_by_id(transaction_id, current_user.id)
    if transaction is None:
        raise _not_found()
    return transaction


@router.put("/{transaction_id}", response_model=TransactionRecord)
async def update_transaction(
    transaction_id: TransactionId,
    changes: TransactionUpdate,
    current_user: UserIdentity = Depends(get_current_user),
    ledger: TransactionLedger = Depends(get_ledger),
):
    """Replace the fields of a transaction. The owner never changes."""
    transaction = await ledger.update(transaction_id, current_user.id, changes)
    if transaction is None:
        raise _not_found()
    return transaction


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: TransactionId,
    current_user: UserIdentity = Depends(get_current_user),
    ledger: TransactionLedger = Depends(get_ledger),
):
    if not await ledger.delete(transaction_id, current_user.id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
