"""Session carrier: remembers the authenticated user across requests."""
from datetime import timedelta
from typing import Protocol

from fastapi import Request, Response

from fintrack.config import settings
from fintrack.core.security import create_access_token, decode_access_token


class SessionCarrier(Protocol):
    """Establishes and tears down an authenticated context for a caller."""

    def establish(self, user_id: str, persistent: bool) -> None: ...

    def clear(self) -> None: ...


class CookieSessionCarrier:
    """
    Session carrier storing a signed JWT in an HTTP-only cookie.

    A persistent session ("remember me") gets a cookie with an explicit
    max-age and a long-lived token; otherwise the cookie lives until the
    browser closes and the token expires after JWT_EXPIRY_MINUTES.
    """

    def __init__(self, response: Response):
        """
        Args:
            response: The outgoing response the cookie is written to
        """
        self.response = response

    def establish(self, user_id: str, persistent: bool) -> None:
        if persistent:
            lifetime = timedelta(days=settings.REMEMBER_ME_EXPIRY_DAYS)
            max_age = int(lifetime.total_seconds())
        else:
            lifetime = timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
            max_age = None

        token = create_access_token(data={"sub": user_id}, expires_delta=lifetime)
        self.response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=token,
            max_age=max_age,
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )

    def clear(self) -> None:
        # Deleting a cookie the client never had is harmless
        self.response.delete_cookie(
            key=settings.SESSION_COOKIE_NAME,
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )


def read_session_token(request: Request) -> str | None:
    """Return the session token from the cookie, or from a Bearer header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.replace("Bearer ", "")
    return None


def resolve_user_id(request: Request) -> str | None:
    """
    Resolve the user id carried by the request's session token.

    Raises:
        jwt.PyJWTError: if a token is present but invalid or expired
    """
    token = read_session_token(request)
    if token is None:
        return None
    payload = decode_access_token(token)
    return payload.get("sub")
