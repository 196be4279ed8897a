from fastapi import APIRouter, Depends, Response, status

from fintrack.core.dependencies import get_identity_gateway
from fintrack.schemas.auth import LoginForm, RegisterForm
from fintrack.schemas.outcome import Outcome
from fintrack.services.identity_gateway import IdentityGateway

router = APIRouter()


@router.get("/register", response_model=Outcome)
async def register_form(gateway: IdentityGateway = Depends(get_identity_gateway)):
    """Empty registration form."""
    return gateway.begin_registration()


@router.post("/register", response_model=Outcome)
async def register(
    form: RegisterForm,
    response: Response,
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    """
    Register a new user.

    Redirects to login on success. Registration does not sign the user in.
    """
    outcome = await gateway.register(form)
    if outcome.has_errors:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return outcome


@router.get("/login", response_model=Outcome)
async def login_form(gateway: IdentityGateway = Depends(get_identity_gateway)):
    """Empty login form."""
    return gateway.begin_login()


@router.post("/login", response_model=Outcome)
async def login(
    form: LoginForm,
    response: Response,
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    """Login endpoint. Sets the session cookie and redirects to the dashboard."""
    outcome = await gateway.login(form)
    if outcome.has_errors:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return outcome


@router.post("/logout", response_model=Outcome)
async def logout(gateway: IdentityGateway = Depends(get_identity_gateway)):
    """Clear the session cookie. Safe to call without a session."""
    return gateway.logout()


@router.get("/access-denied", response_model=Outcome)
async def access_denied():
    return IdentityGateway.access_denied()
