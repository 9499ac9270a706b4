# tests/conftest.py
import httpx
import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from foodrescue.core.config import Settings, get_settings
from foodrescue.deps import get_notifier, get_repo
from foodrescue.main import app
from foodrescue.repos.inmemory import InMemoryRepo
from foodrescue.services.notifier import Notifier

ADMIN_EMAIL = "admin@example.com"
WEBHOOK_URL = "https://hooks.slack.example.com/services/T000/B000/XXXX"

DONOR_PROFILE = {
    "businessName": "Corner Bistro",
    "contactName": "Sam Rivera",
    "phone": "5551234567",
    "address": {"street": "1 Main St", "city": "Springfield", "state": "IL", "zip": "62701"},
    "businessType": "restaurant",
}


@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        jwt_secret="test-secret",
        admin_emails=f" {ADMIN_EMAIL.upper()} , ops@example.com",
        slack_webhook_url=WEBHOOK_URL,
        use_mongo=False,
    )


@pytest.fixture
def repo():
    return InMemoryRepo()


@pytest.fixture
def webhook_calls():
    return []


@pytest.fixture
def webhook_handler(webhook_calls):
    def handler(request: httpx.Request) -> httpx.Response:
        webhook_calls.append(request)
        return httpx.Response(200, text="ok")
    return handler


@pytest.fixture
def notifier(webhook_handler):
    return Notifier(WEBHOOK_URL, transport=httpx.MockTransport(webhook_handler))


@pytest.fixture
async def test_client(repo, settings, notifier):
    app.dependency_overrides[get_repo] = lambda: repo
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app, raise_app_exceptions=True)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def signup(test_client):
    """Register a principal and return (auth headers, principal id)."""
    async def _signup(email: str, password: str = "correct-horse", profile: dict | None = None):
        body = {"email": email, "password": password}
        if profile is not None:
            body["profile"] = profile
        r = await test_client.post("/api/auth/register", json=body)
        assert r.status_code == 201, r.text
        headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
        me = (await test_client.get("/api/auth/me", headers=headers)).json()
        return headers, me["principalId"]
    return _signup


@pytest.fixture
async def admin_headers(signup):
    headers, _ = await signup(ADMIN_EMAIL)
    return headers


@pytest.fixture
async def donor(signup):
    headers, donor_id = await signup("bistro@example.com", profile=DONOR_PROFILE)
    return {"headers": headers, "id": donor_id}


@pytest.fixture
def pickup_payload():
    def _payload(donor_id: str, **overrides):
        body = {
            "donorId": donor_id,
            "foodDescription": "50 lbs sandwiches",
            "estimatedWeight": 50,
            "pickupAddress": dict(DONOR_PROFILE["address"]),
            "pickupDate": "2024-06-01",
            "pickupTimeWindow": "morning",
            "contactOnArrival": "Call 555-123-4567",
        }
        body.update(overrides)
        return body
    return _payload
