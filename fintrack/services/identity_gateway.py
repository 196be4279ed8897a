"""Registration, login, logout and access-denied flows."""
from pydantic import ValidationError

from fintrack.core.exceptions import DuplicateEmailError
from fintrack.core.logging import app_logger
from fintrack.core.security import CredentialVerifier
from fintrack.core.session import SessionCarrier
from fintrack.schemas.auth import (
    LoginCandidate,
    LoginForm,
    RegisterForm,
    RegistrationCandidate,
)
from fintrack.schemas.outcome import FORM_ERROR_KEY, Outcome
from fintrack.stores.base import CredentialStore

INVALID_LOGIN_MESSAGE = "Invalid login attempt."
ACCESS_DENIED_MESSAGE = "You are not authorized to access this resource."


def _field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic validation errors by the field they belong to."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else FORM_ERROR_KEY
        ctx = error.get("ctx") or {}
        message = str(ctx["error"]) if "error" in ctx else error["msg"]
        errors.setdefault(field, []).append(message)
    return errors


def _echo_email(value) -> str:
    """Only a string email is echoed back to the form."""
    return value if isinstance(value, str) else ""


class IdentityGateway:
    """
    Orchestrates the account lifecycle for one caller.

    Registration never signs the caller in. Login asks the session carrier
    to establish an authenticated context; logout asks it to tear the context
    down. Every method returns an Outcome instead of raising; only
    StoreUnavailableError escapes.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        verifier: CredentialVerifier,
        sessions: SessionCarrier,
    ):
        """
        Args:
            credentials: Where user identities live
            verifier: One-way password hashing capability
            sessions: Carrier for the caller's authenticated context
        """
        self.credentials = credentials
        self.verifier = verifier
        self.sessions = sessions

    def begin_registration(self) -> Outcome:
        return Outcome.show_form("register", form={"email": ""})

    async def register(self, form: RegisterForm) -> Outcome:
        """
        Create a new identity from a registration form.

        Returns:
            Outcome: redirect to login on success, otherwise the register form
            with field-level errors
        """
        echoed = {"email": _echo_email(form.email)}

        try:
            candidate = RegistrationCandidate.model_validate(form.model_dump())
        except ValidationError as e:
            return Outcome.show_form("register", form=echoed, errors=_field_errors(e))

        if await self.credentials.get_by_email(candidate.email) is not None:
            return self._duplicate_email(candidate.email)

        hashed_password = self.verifier.hash(candidate.password)
        try:
            user = await self.credentials.create(candidate.email, hashed_password)
        except DuplicateEmailError:
            return self._duplicate_email(candidate.email)

        app_logger.info(f"User registered: UserID: {user.id}")
        return Outcome.redirect("login")

    def begin_login(self) -> Outcome:
        return Outcome.show_form("login", form={"email": "", "remember_me": False})

    async def login(self, form: LoginForm) -> Outcome:
        """
        Verify credentials and sign the caller in.

        Missing fields are reported per field without touching the store.
        Every other failure produces the same generic message, so the result
        never tells whether the email is registered.
        """
        echoed = {"email": _echo_email(form.email), "remember_me": form.remember_me is True}

        try:
            candidate = LoginCandidate.model_validate(form.model_dump())
        except ValidationError as e:
            return Outcome.show_form("login", form=echoed, errors=_field_errors(e))

        user = await self.credentials.get_by_email(candidate.email)
        if not user or not self.verifier.verify(candidate.password, user.hashed_password):
            app_logger.info("Login failed: invalid credentials")
            return Outcome.show_form(
                "login",
                form=echoed,
                errors={FORM_ERROR_KEY: [INVALID_LOGIN_MESSAGE]},
            )

        self.sessions.establish(user.id, persistent=candidate.remember_me)
        app_logger.info(f"User logged in: UserID: {user.id}")
        return Outcome.redirect("dashboard")

    def logout(self) -> Outcome:
        self.sessions.clear()
        return Outcome.redirect("login")

    @staticmethod
    def access_denied() -> Outcome:
        return Outcome.show_form("access_denied", message=ACCESS_DENIED_MESSAGE)

    def _duplicate_email(self, email: str) -> Outcome:
        return Outcome.show_form(
            "register",
            form={"email": email},
            errors={"email": ["Email already registered"]},
        )
