from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.exceptions import NotAuthenticatedError
from fintrack.core.security import PasswordHasher
from fintrack.core.session import CookieSessionCarrier
from fintrack.database import get_db
from fintrack.schemas.auth import UserIdentity
from fintrack.services.identity_gateway import IdentityGateway
from fintrack.services.ledger import TransactionLedger
from fintrack.stores.credential_store import SqlCredentialStore
from fintrack.stores.record_store import SqlRecordStore


async def get_current_user(request: Request) -> UserIdentity:
    """
    Get current authenticated user from request state.

    UserInjectionMiddleware has already read the session token and loaded the
    user. This dependency simply retrieves it.

    Args:
        request: FastAPI request object with user in state

    Returns:
        UserIdentity: The authenticated user

    Raises:
        NotAuthenticatedError: if no user is attached to the request; the
            application answers with the access-denied outcome
    """
    user = getattr(request.state, "user", None)
    if user is None:
        raise NotAuthenticatedError("Could not validate credentials")
    return user


def get_identity_gateway(
    response: Response, db: AsyncSession = Depends(get_db)
) -> IdentityGateway:
    """Build the identity gateway for one request, bound to its response."""
    return IdentityGateway(
        credentials=SqlCredentialStore(db),
        verifier=PasswordHasher(),
        sessions=CookieSessionCarrier(response),
    )


def get_ledger(db: AsyncSession = Depends(get_db)) -> TransactionLedger:
    return TransactionLedger(SqlRecordStore(db))
