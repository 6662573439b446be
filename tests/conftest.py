import os
import tempfile

# Settings are read at import time
_TEST_DIR = tempfile.mkdtemp(prefix="gentest-tests-")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/data/gentest.db"
os.environ.pop("GEMINI_API_KEY", None)

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from gentest.core.database import enable_sqlite_foreign_keys, get_database
from gentest.core.dependencies import get_ai_service, get_functions_client
from gentest.core.exceptions import UpstreamModelError
from gentest.core.functions_client import FunctionsClient
from gentest.models.database import Base
from gentest.repositories.interfaces.ai_service import IAIService


class FakeAIService(IAIService):
    """Stands in for Gemini: replies are queued, prompts are recorded."""

    def __init__(self):
        self.configured = True
        self.replies = []
        self.prompts = []
        self.error = None

    def is_configured(self) -> bool:
        return self.configured

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if not self.replies:
            raise UpstreamModelError("no reply queued")
        return self.replies.pop(0)


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def ai_service():
    return FakeAIService()


@pytest.fixture
def test_client(engine, ai_service):
    """Synchronous test client wired to the test database and the fake model.

    Generation functions are invoked through the app itself, so a request that
    creates a use case goes through the real function endpoint.
    """
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    functions_client = FunctionsClient(
        base_url="http://test/functions/v1",
        transport=httpx.ASGITransport(app=app),
    )

    app.dependency_overrides[get_database] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    app.dependency_overrides[get_functions_client] = lambda: functions_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register_and_login(client: TestClient, email: str = "ana@example.com", password: str = "secret123") -> dict:
    """Create an account and return bearer headers for it"""
    response = client.post(
        "/api/v1/auth/register",
        json={"name": email.split("@")[0], "email": email, "password": password},
    )
    assert response.status_code == 201, response.text

    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def auth_headers(test_client):
    return register_and_login(test_client)
