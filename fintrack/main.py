from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fintrack.api.endpoints import auth, dashboard, transactions
from fintrack.config import settings
from fintrack.core.exceptions import NotAuthenticatedError, StoreUnavailableError
from fintrack.core.logging import app_logger
from fintrack.core.middleware import (
    STORE_UNAVAILABLE_DETAIL,
    RequestLoggingMiddleware,
    UserInjectionMiddleware,
)
from fintrack.database import init_models
from fintrack.services.identity_gateway import IdentityGateway


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add user injection middleware (reads the session and injects the user)
app.add_middleware(UserInjectionMiddleware)

# Add request logging middleware (outermost - logs the user once resolved)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth.router, tags=["auth"])
app.include_router(dashboard.router, tags=["dashboard"])
app.include_router(
    transactions.router, prefix="/transactions", tags=["transactions"]
)


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=IdentityGateway.access_denied().model_dump(mode="json"),
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    # Log internal error details, return a generic error to the client
    app_logger.error(f"Store unavailable on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": STORE_UNAVAILABLE_DETAIL},
    )


@app.get("/")
async def root():
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
