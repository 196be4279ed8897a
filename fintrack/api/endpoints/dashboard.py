from fastapi import APIRouter, Depends

from fintrack.core.dependencies import get_current_user, get_ledger
from fintrack.schemas.auth import UserIdentity, UserResponse
from fintrack.schemas.transaction import DashboardResponse
from fintrack.services.ledger import TransactionLedger

router = APIRouter()

RECENT_TRANSACTIONS_LIMIT = 5


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    current_user: UserIdentity = Depends(get_current_user),
    ledger: TransactionLedger = Depends(get_ledger),
):
    """
    Landing view after login.

    Returns the user's profile and their most recent transactions, newest
    transaction date first.
    """
    transactions = await ledger.list_all(current_user.id)
    recent = sorted(
        transactions, key=lambda t: (t.transaction_date, t.id), reverse=True
    )[:RECENT_TRANSACTIONS_LIMIT]
    return DashboardResponse(
        user=UserResponse.model_validate(current_user),
        recent_transactions=recent,
    )
