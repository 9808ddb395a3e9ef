"""Shared fixtures for pytest.

Uses SQLite in-memory for tests, shared across sessions through StaticPool.
"""

import os
from typing import AsyncGenerator, Iterator, List, Optional, Tuple

# Set test settings before any app imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.core.dependencies import get_mail_service, get_tmdb_service
from app.core.exceptions import MailDeliveryError
from app.database import Base, get_db
from app.main import app
from app.services.mail_service import MailService
from app.services.tmdb_service import TMDBService

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

test_settings = Settings(
    secret_key="test-secret-key",
    database_url="sqlite://",
    tmdb_api_key="test-tmdb-key",
    tmdb_base_url="https://tmdb.test/3",
    smtp_host="",
)


class FakeMailService(MailService):
    """Records outgoing mail instead of talking to SMTP."""

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.sent: List[Tuple[str, str, Optional[str]]] = []
        self.fail = False

    async def _record(self, kind: str, email: str, code: Optional[str] = None) -> None:
        if self.fail:
            raise MailDeliveryError()
        self.sent.append((kind, email, code))

    async def send_verification_code(self, email: str, code: str, username: str) -> None:
        await self._record("verification", email, code)

    async def send_welcome_email(self, email: str, username: str) -> None:
        await self._record("welcome", email)

    async def send_password_reset_code(self, email: str, code: str, username: str) -> None:
        await self._record("reset", email, code)

    def last_code(self, kind: str, email: str) -> Optional[str]:
        for sent_kind, sent_email, code in reversed(self.sent):
            if sent_kind == kind and sent_email == email:
                return code
        return None

    def count(self, kind: str, email: str) -> int:
        return sum(1 for k, e, _ in self.sent if k == kind and e == email)


def tmdb_handler(request: httpx.Request) -> httpx.Response:
    """Default fake TMDB: every list endpoint returns one page with a single movie."""
    if request.url.path.endswith("/genre/movie/list"):
        return httpx.Response(200, json={"genres": [{"id": 28, "name": "액션"}]})
    return httpx.Response(
        200,
        json={
            "page": int(request.url.params.get("page", 1)),
            "total_pages": 1,
            "total_results": 1,
            "results": [
                {
                    "id": 550,
                    "title": "파이트 클럽",
                    "poster_path": "/fight.jpg",
                    "release_date": "1999-10-15",
                    "vote_average": 8.4,
                    "vote_count": 26000,
                    "genre_ids": [18],
                }
            ],
        },
    )


def override_get_db() -> Iterator[Session]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def settings() -> Settings:
    return test_settings


@pytest.fixture
def mail() -> FakeMailService:
    return FakeMailService(test_settings)


@pytest.fixture
def tmdb_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def tmdb(tmdb_requests) -> TMDBService:
    def handler(request: httpx.Request) -> httpx.Response:
        tmdb_requests.append(request)
        return tmdb_handler(request)

    return TMDBService(test_settings, transport=httpx.MockTransport(handler))


@pytest.fixture
def db_session() -> Iterator[Session]:
    """Direct DB session for model manipulation in tests."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest_asyncio.fixture
async def client(mail, tmdb) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for the FastAPI app."""
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_mail_service] = lambda: mail
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


async def register(client: AsyncClient, username: str, email: str, password: str = "secret123") -> httpx.Response:
    return await client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


async def register_verified(
    client: AsyncClient,
    mail: FakeMailService,
    username: str,
    email: str,
    password: str = "secret123",
) -> dict:
    """Register, verify and log in; returns auth headers."""
    resp = await register(client, username, email, password)
    assert resp.status_code == 201

    code = mail.last_code("verification", email)
    resp = await client.post("/api/auth/verify-email", json={"email": email, "code": code})
    assert resp.status_code == 200

    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


@pytest_asyncio.fixture
async def auth_headers(client, mail) -> dict:
    """A verified, logged-in test user."""
    return await register_verified(client, mail, "tester", "tester@example.com")
