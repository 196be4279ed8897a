import json
import time
from typing import Callable

import jwt
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from fintrack.config import settings
from fintrack.core.exceptions import StoreUnavailableError
from fintrack.core.logging import api_logger, app_logger
from fintrack.core.session import resolve_user_id
from fintrack.database import AsyncSessionLocal
from fintrack.stores.credential_store import SqlCredentialStore

STORE_UNAVAILABLE_DETAIL = "Service temporarily unavailable"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all API requests with details including path, parameters,
    timestamp, status code, and response time.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and log details.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            Response: The response from the route handler
        """
        if request.url.path in settings.LOG_EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.time()

        method = request.method
        path = request.url.path
        query_params = dict(request.query_params) if request.query_params else {}

        # Get client IP (check X-Forwarded-For for proxy scenarios)
        client_ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        if not client_ip:
            client_ip = request.headers.get("X-Real-IP", "")
        if not client_ip and request.client:
            client_ip = request.client.host

        user_agent = request.headers.get("User-Agent", "Unknown")

        try:
            response = await call_next(request)
        except Exception as e:
            api_logger.error(
                f"{method} {path} - Status: 500 - IP: {client_ip} - "
                f"UserID: {self._user_id(request) or 'Anonymous'} - "
                f"Query: {json.dumps(query_params)} - Error: {str(e)}"
            )
            raise

        duration_ms = int((time.time() - start_time) * 1000)

        # Log the request (without sensitive body data). The user is read
        # after the inner middleware has resolved it.
        try:
            api_logger.info(
                f"{method} {path} - Status: {response.status_code} - "
                f"IP: {client_ip} - UserID: {self._user_id(request) or 'Anonymous'} - "
                f"UserAgent: {user_agent} - Query: {json.dumps(query_params)} - "
                f"Duration: {duration_ms}ms"
            )
        except Exception as e:
            # Don't let logging errors break the API
            print(f"Error logging request: {e}", flush=True)

        return response

    @staticmethod
    def _user_id(request: Request) -> str | None:
        user = getattr(request.state, "user", None)
        return user.id if user else None


class UserInjectionMiddleware(BaseHTTPMiddleware):
    """
    Middleware to resolve the session token and inject the user into request state.

    This middleware:
    - Reads the session token from the session cookie (or a Bearer header)
    - Loads the identity the token names from the credential store
    - Stores it in request.state.user for downstream use
    - Leaves user=None for missing, invalid or expired tokens
    - Skips public paths that don't need authentication
    """

    PUBLIC_PATHS = {
        "/health",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/register",
        "/login",
        "/logout",
        "/access-denied",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and inject user into request state.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            Response: The response from the route handler
        """
        request.state.user = None

        if request.url.path in self.PUBLIC_PATHS:
            return await call_next(request)

        try:
            user_id = resolve_user_id(request)
        except jwt.PyJWTError:
            # Token is invalid or expired: the caller stays anonymous and
            # route handlers decide if authentication is required
            user_id = None

        if user_id:
            try:
                async with AsyncSessionLocal() as db:
                    request.state.user = await SqlCredentialStore(db).get_by_id(user_id)
            except StoreUnavailableError as e:
                app_logger.error(f"Credential store unavailable during user lookup: {e}")
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={"detail": STORE_UNAVAILABLE_DETAIL},
                )

        return await call_next(request)
