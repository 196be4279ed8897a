"""Tagged result returned by the identity gateway."""
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Key under which errors that belong to the whole form are reported
FORM_ERROR_KEY = "form"

# Where each named redirect destination lives
DESTINATIONS = {
    "login": "/login",
    "dashboard": "/dashboard",
}


class OutcomeKind(str, Enum):
    SHOW_FORM = "show_form"
    REDIRECT = "redirect"


class Outcome(BaseModel):
    """
    What the caller should do next: redisplay a view, or go somewhere else.

    show_form outcomes carry the view name, the (non-secret) submitted values
    and any field-level errors. redirect outcomes carry the destination name
    and its location.
    """

    kind: OutcomeKind
    view: str | None = None
    destination: str | None = None
    location: str | None = None
    form: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, list[str]] = Field(default_factory=dict)
    message: str | None = None

    @classmethod
    def show_form(
        cls,
        view: str,
        form: dict[str, Any] | None = None,
        errors: dict[str, list[str]] | None = None,
        message: str | None = None,
    ) -> "Outcome":
        return cls(
            kind=OutcomeKind.SHOW_FORM,
            view=view,
            form=form or {},
            errors=errors or {},
            message=message,
        )

    @classmethod
    def redirect(cls, destination: str) -> "Outcome":
        return cls(
            kind=OutcomeKind.REDIRECT,
            destination=destination,
            location=DESTINATIONS[destination],
        )

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
