import asyncio
import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch
from coffeecore.main import app
from coffeecore.api import routes
from coffeecore.api.auth import require_api_key
from coffeecore.core.site import SessionRegistry
from coffeecore.notify.client import Outcome
from coffeecore.settings import settings

client = TestClient(app)

@pytest.fixture(autouse=True)
def skip_auth():
    app.dependency_overrides[require_api_key] = lambda: None
    yield
    app.dependency_overrides = {}

@pytest.fixture
def notify(make_client):
    fake = make_client(Outcome.DELIVERED)
    with patch.object(routes, "registry", SessionRegistry(fake)):
        yield fake

def _session():
    r = client.post("/api/sessions")
    assert r.status_code == 200
    return r.json()["sessionId"]

def test_health():
    assert client.get("/health").json() == {"status": "ok"}

def test_products_filter():
    r = client.get("/api/products", params={"status": "future"})
    assert r.status_code == 200
    assert [p["id"] for p in r.json()] == ["pellet", "bevande", "oli-cosmesi"]

def test_fake_door_flow_delivered(notify):
    sid = _session()
    r = client.post(f"/api/sessions/{sid}/products/pellet/click")
    assert r.status_code == 200
    assert r.json()["isOpen"] is True
    assert r.json()["submission"]["state"] == "idle"

    r = client.post(f"/api/sessions/{sid}/modal/submit", json={"email": "a@b.com"})
    assert r.status_code == 200
    body = r.json()
    assert body["state"] == "succeeded"
    assert body["message"] == settings.FAKE_DOOR_CONFIRMATION
    assert body["fallback"] is None
    assert notify.calls[0].productId == "pellet"

def test_fake_door_flow_degraded_returns_mailto(notify):
    notify.outcome = Outcome.REJECTED
    sid = _session()
    client.post(f"/api/sessions/{sid}/products/pellet/click")
    body = client.post(f"/api/sessions/{sid}/modal/submit", json={"email": "a@b.com"}).json()
    assert body["state"] == "degraded"
    assert body["message"] is None
    assert body["fallback"]["to"] == settings.ADMIN_EMAIL
    assert body["fallback"]["mailto"].startswith("mailto:")

def test_reclick_other_product_clears_submission(notify):
    sid = _session()
    client.post(f"/api/sessions/{sid}/products/pellet/click")
    client.post(f"/api/sessions/{sid}/modal/submit", json={"email": "a@b.com"})
    body = client.post(f"/api/sessions/{sid}/products/bevande/click").json()
    assert body["product"]["id"] == "bevande"
    assert body["submission"] == {"state": "idle", "message": None, "fallback": None}

def test_modal_submit_when_closed_conflicts(notify):
    sid = _session()
    r = client.post(f"/api/sessions/{sid}/modal/submit", json={"email": "a@b.com"})
    assert r.status_code == 409

def test_invalid_email_is_422_and_nothing_sent(notify):
    sid = _session()
    client.post(f"/api/sessions/{sid}/products/pellet/click")
    r = client.post(f"/api/sessions/{sid}/modal/submit", json={"email": "nope"})
    assert r.status_code == 422
    assert notify.calls == []

def test_unknown_product_is_422(notify):
    sid = _session()
    r = client.post(f"/api/sessions/{sid}/products/caffe-spaziale/click")
    assert r.status_code == 422

def test_contact_form(notify):
    sid = _session()
    r = client.post(f"/api/sessions/{sid}/contact",
                    json={"name": "Ada", "email": "ada@b.com", "message": "Vorrei una demo"})
    assert r.status_code == 200
    assert r.json()["state"] == "succeeded"
    assert client.get(f"/api/sessions/{sid}/contact").json()["state"] == "succeeded"
    assert notify.calls[0].productId == "contact"

def test_focus_section(notify):
    sid = _session()
    assert client.post(f"/api/sessions/{sid}/sections/contatti/focus").json() == {"sectionId": "contatti", "found": True}
    assert client.post(f"/api/sessions/{sid}/sections/nonexistent/focus").json()["found"] is False

def test_unknown_session_is_404(notify):
    assert client.post("/api/sessions/missing/products/pellet/click").status_code == 404
    assert client.delete("/api/sessions/missing").status_code == 404

def test_api_key_enforced_when_configured():
    app.dependency_overrides = {}
    with patch.object(settings, "API_KEY", "secret"):
        assert client.get("/api/products").status_code == 401
        assert client.get("/api/products", headers={"x-api-key": "secret"}).status_code == 200

@pytest.mark.parametrize("email", ["a@.b..c", "<x>@y.z", "a@b.c."])
def test_malformed_email_never_reaches_endpoint(notify, email):
    sid = _session()
    client.post(f"/api/sessions/{sid}/products/pellet/click")
    assert client.post(f"/api/sessions/{sid}/modal/submit", json={"email": email}).status_code == 422
    r = client.post(f"/api/sessions/{sid}/contact", json={"name": "Ada", "email": email, "message": "Ciao"})
    assert r.status_code == 422
    assert notify.calls == []

@pytest.mark.asyncio
async def test_result_arriving_after_close_carries_no_fallback(make_client):
    fake = make_client(Outcome.TRANSPORT_FAILED, hold=True)
    transport = httpx.ASGITransport(app=app)
    with patch.object(routes, "registry", SessionRegistry(fake)):
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            sid = (await ac.post("/api/sessions")).json()["sessionId"]
            await ac.post(f"/api/sessions/{sid}/products/pellet/click")
            pending = asyncio.create_task(ac.post(f"/api/sessions/{sid}/modal/submit", json={"email": "a@b.com"}))
            while not fake.calls:
                await asyncio.sleep(0.01)
            closed = await ac.post(f"/api/sessions/{sid}/modal/close")
            assert closed.json()["isOpen"] is False
            fake.release()
            r = await pending

    assert r.status_code == 200
    assert r.json() == {"state": "degraded", "message": None, "fallback": None}
