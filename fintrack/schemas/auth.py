import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationInfo, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REQUIRED_MESSAGE = "This field is required"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _require(v):
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError(REQUIRED_MESSAGE)
    return v


class RegisterForm(BaseModel):
    """
    Raw registration form as submitted.

    Every field may be missing or of the wrong type; RegistrationCandidate
    reports those as field errors.
    """

    email: Any = None
    password: Any = None
    confirm_password: Any = None


class LoginForm(BaseModel):
    """Raw login form as submitted."""

    email: Any = None
    password: Any = None
    remember_me: Any = False


class RegistrationCandidate(BaseModel):
    """A registration form that passed every field rule."""

    email: str
    password: str
    confirm_password: str

    @field_validator("email", "password", "confirm_password", mode="before")
    def validate_required(cls, v):
        return _require(v)

    @field_validator("email")
    def validate_email(cls, v):
        v = normalize_email(v)
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("password")
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain digit")
        if not re.search(r'[!@#$%^&*(),.?":{}|<>]', v):
            raise ValueError("Password must contain special character")
        return v

    @field_validator("confirm_password")
    def validate_passwords_match(cls, v, info: ValidationInfo):
        password = info.data.get("password")
        if password is not None and v != password:
            raise ValueError("Passwords do not match")
        return v


class LoginCandidate(BaseModel):
    """A login form with both credentials present."""

    email: str
    password: str
    remember_me: bool = False

    @field_validator("email", "password", mode="before")
    def validate_required(cls, v):
        return _require(v)

    @field_validator("remember_me", mode="before")
    def validate_remember_me(cls, v):
        return False if v is None else v

    @field_validator("email")
    def validate_email(cls, v):
        return normalize_email(v)


class UserIdentity(BaseModel):
    """Stored identity, including hash material. Never returned to clients."""

    model_config = {"from_attributes": True}

    id: str
    email: str
    hashed_password: str
    created_at: datetime | None = None


class UserResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    email: str
    created_at: datetime | None = None
