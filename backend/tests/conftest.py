"""
Shared fixtures: a fresh SQLite database per test, HTTP clients, and fake OAuth providers
"""
import os

# Must be set before the app modules read their configuration
os.environ["ENVIRONMENT"] = "test"
os.environ["MOCK_MODE"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["APP_BASE_URL"] = "http://testserver"
os.environ["LOG_LEVEL"] = "WARNING"
for _provider in ("GOOGLE", "GITHUB", "APPLE"):
    os.environ[f"{_provider}_CLIENT_ID"] = f"{_provider.lower()}-client-id"
    os.environ[f"{_provider}_CLIENT_SECRET"] = f"{_provider.lower()}-client-secret"

import pytest
from fastapi.testclient import TestClient

import database
from main import app
from services.dependencies import get_oauth_factory
from services.errors import OAuthError
from services.oauth import OAuthStrategyFactory, TokenSet

SAMPLE_BRD = """Customer Portal BRD
The system must allow customers to register with an email address.
The system shall send a confirmation email after registration.
The dashboard page should show the last five orders.
Response time must stay under 200 ms for 95% of requests.
As a customer, I want to reset my password so that I can regain access.
GET /api/orders returns the customer's orders.
"""


class FakeTokenExchange:
    """Stands in for the provider's token endpoint"""

    def __init__(self):
        self.calls = []
        self.id_token = None
        self.error = None

    async def exchange(self, provider, token_endpoint, code, redirect_uri, code_verifier=None):
        self.calls.append({
            "provider": provider,
            "code": code,
            "redirect_uri": redirect_uri,
            "code_verifier": code_verifier,
        })
        if self.error:
            raise self.error
        return TokenSet(
            access_token=f"access-{len(self.calls)}",
            refresh_token=f"refresh-{len(self.calls)}",
            id_token=self.id_token,
            expires_in=3600,
        )


class FakeUserInfoFetcher:
    """Returns canned JSON per endpoint; an exception value is raised instead"""

    def __init__(self, responses=None):
        self.responses = responses or {}

    async def fetch(self, endpoint, access_token):
        if endpoint not in self.responses:
            raise OAuthError(f"Unexpected endpoint {endpoint}")
        value = self.responses[endpoint]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(autouse=True)
def test_db(tmp_path):
    """Point the app at an empty SQLite file for each test"""
    engine = database.init_db(f"sqlite:///{tmp_path / 'test.db'}")
    yield engine
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def db_session(test_db):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_client():
    """Factory for independent clients, each with its own cookie jar"""
    def _make():
        return TestClient(app)
    return _make


@pytest.fixture
def signup():
    """Sign a client up and return the response body"""
    def _signup(client, email="user@example.com", password="secret123", name="Test User"):
        response = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
        assert response.status_code == 200, response.text
        return response.json()
    return _signup


@pytest.fixture
def auth_client(client, signup):
    """A client signed in as a fresh FREE user"""
    signup(client)
    return client


@pytest.fixture
def oauth_fakes():
    """Installs fake provider collaborators behind the OAuth routes"""
    exchange = FakeTokenExchange()
    fetcher = FakeUserInfoFetcher()
    factory = OAuthStrategyFactory(token_exchange=exchange, user_info_fetcher=fetcher)
    app.dependency_overrides[get_oauth_factory] = lambda: factory
    return exchange, fetcher


@pytest.fixture
def sample_brd():
    return SAMPLE_BRD


@pytest.fixture
def fake_fetcher():
    return FakeUserInfoFetcher
