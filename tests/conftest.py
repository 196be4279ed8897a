"""Shared pytest fixtures for all tests."""
import os

# Settings are read when fintrack is first imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./fintrack_test.db")
os.environ.setdefault(
    "JWT_SECRET_KEY", "3f8a2c1d9e7b6a5f4c3d2e1f0a9b8c7d6e5f4a3b2c1d0e9f8a7b6c5d4e3f2a1b"
)

import uuid
from datetime import datetime, timezone
from typing import Any

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from fintrack.core import middleware
from fintrack.core.exceptions import DuplicateEmailError, StoreUnavailableError
from fintrack.database import Base, get_db
from fintrack.main import app
from fintrack.models import Transaction, User  # noqa: F401
from fintrack.schemas.auth import UserIdentity
from fintrack.schemas.transaction import TransactionRecord
from fintrack.services.identity_gateway import IdentityGateway
from fintrack.services.ledger import TransactionLedger


# ===== IN-MEMORY FAKES =====

class InMemoryCredentialStore:
    """CredentialStore kept in a dict, with call counters and a failure switch."""

    def __init__(self):
        self.users: dict[str, UserIdentity] = {}
        self.lookups = 0
        self.unavailable = False

    def _check_available(self):
        if self.unavailable:
            raise StoreUnavailableError("credential store is down")

    async def get_by_id(self, user_id: str) -> UserIdentity | None:
        self._check_available()
        self.lookups += 1
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> UserIdentity | None:
        self._check_available()
        self.lookups += 1
        return next((u for u in self.users.values() if u.email == email), None)

    async def create(self, email: str, hashed_password: str) -> UserIdentity:
        self._check_available()
        if any(u.email == email for u in self.users.values()):
            raise DuplicateEmailError(email)
        user = UserIdentity(
            id=str(uuid.uuid4()),
            email=email,
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc),
        )
        self.users[user.id] = user
        return user


class InMemoryRecordStore:
    """RecordStore kept in a dict keyed by transaction id."""

    def __init__(self):
        self.rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1

    def _owned(self, transaction_id: int, user_id: str) -> dict[str, Any] | None:
        row = self.rows.get(transaction_id)
        if row is not None and row["user_id"] == user_id:
            return row
        return None

    async def insert(self, values: dict[str, Any]) -> TransactionRecord:
        row = {**values, "id": self._next_id}
        self._next_id += 1
        self.rows[row["id"]] = row
        return TransactionRecord(**row)

    async def list_for_owner(self, user_id: str) -> list[TransactionRecord]:
        return [
            TransactionRecord(**row)
            for _, row in sorted(self.rows.items())
            if row["user_id"] == user_id
        ]

    async def get_owned(self, transaction_id: int, user_id: str) -> TransactionRecord | None:
        row = self._owned(transaction_id, user_id)
        return TransactionRecord(**row) if row else None

    async def update_owned(
        self, transaction_id: int, user_id: str, values: dict[str, Any]
    ) -> bool:
        row = self._owned(transaction_id, user_id)
        if row is None:
            return False
        row.update(values)
        return True

    async def delete_owned(self, transaction_id: int, user_id: str) -> bool:
        if self._owned(transaction_id, user_id) is None:
            return False
        del self.rows[transaction_id]
        return True


class FakeSessionCarrier:
    """Records what the gateway asked of the session."""

    def __init__(self):
        self.user_id: str | None = None
        self.persistent: bool | None = None
        self.clear_calls = 0

    def establish(self, user_id: str, persistent: bool) -> None:
        self.user_id = user_id
        self.persistent = persistent

    def clear(self) -> None:
        self.user_id = None
        self.persistent = None
        self.clear_calls += 1


class FakeVerifier:
    """Reversible stand-in for the Argon2 hasher, fast enough for unit tests."""

    PREFIX = "hashed::"

    def __init__(self):
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        return self.PREFIX + password

    def verify(self, password: str, hashed_password: str) -> bool:
        self.verify_calls += 1
        return hashed_password == self.PREFIX + password


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def session_carrier():
    return FakeSessionCarrier()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def gateway(credential_store, verifier, session_carrier):
    return IdentityGateway(credential_store, verifier, session_carrier)


@pytest.fixture
def ledger(record_store):
    return TransactionLedger(record_store)


# ===== DATABASE CONFIGURATION =====

@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite database file per test, with all tables created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'fintrack_test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def TestSessionLocal(test_engine):
    """Create session maker for tests."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ===== DEPENDENCY OVERRIDE =====

@pytest.fixture
def override_get_db(TestSessionLocal, monkeypatch):
    """Override FastAPI's get_db dependency and middleware database session."""
    async def _override_get_db():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    monkeypatch.setattr(middleware, "AsyncSessionLocal", TestSessionLocal)

    yield

    app.dependency_overrides.clear()


# ===== SHARED FIXTURES =====

@pytest.fixture
async def client(override_get_db):
    """Create test client. Cookies persist across requests like a browser."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session(TestSessionLocal):
    """Get database session."""
    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@pytest.fixture
async def registered_user(client: AsyncClient):
    """Register a user and return credentials."""
    email = "testuser@example.com"
    password = "TestPass123!"
    await client.post(
        "/register",
        json={"email": email, "password": password, "confirm_password": password},
    )
    return {"email": email, "password": password}


@pytest.fixture
async def logged_in_user(client: AsyncClient, registered_user: dict):
    """Register and log in; the client now carries the session cookie."""
    response = await client.post(
        "/login",
        json={
            "email": registered_user["email"],
            "password": registered_user["password"],
        },
    )
    assert response.status_code == 200
    return registered_user
