"""Application exception types."""


class FintrackError(Exception):
    """Base class for all application errors."""


class DuplicateEmailError(FintrackError):
    """An identity with this email already exists."""

    def __init__(self, email: str):
        super().__init__("Email already registered")
        self.email = email


class StoreUnavailableError(FintrackError):
    """
    A backing store failed while serving the current request.

    This is the only error class that propagates out of the gateway and the
    ledger; the application turns it into a generic 503 response.
    """


class NotAuthenticatedError(FintrackError):
    """No authenticated identity is attached to the current request."""
