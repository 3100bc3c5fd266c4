import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from unittest.mock import patch

from app.main import app
from app.settings import settings
from app.store.link_repo import MemoryLinkStore, get_link_store
from app.store.models import SecureLink

client = TestClient(app)


@pytest.fixture(autouse=True)
def wiring():
    store = MemoryLinkStore([
        SecureLink(
            id="L1",
            token="very-secret-token",
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            customer_email="alice@x.com",
            staff_creator_email="bob@staff.com",
        )
    ])
    app.dependency_overrides[get_link_store] = lambda: store
    with patch.object(settings, "ADMIN_RBAC_ENABLED", True), \
         patch.object(settings, "ADMIN_API_KEY", "adm"):
        yield
    app.dependency_overrides = {}


def test_link_snapshot_is_redacted():
    res = client.get("/admin/links/L1", headers={"x-admin-key": "adm"})
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == "L1"
    assert body["status"] == "pending"
    assert body["expired"] is True
    assert body["staff_creator_email"] == "bob@staff.com"
    assert "very-secret-token" not in res.text
    assert "alice@x.com" not in res.text


def test_link_snapshot_unknown_is_404():
    res = client.get("/admin/links/nope", headers={"x-admin-key": "adm"})
    assert res.status_code == 404


def test_admin_requires_key():
    assert client.get("/admin/links/L1").status_code == 403
    assert client.get("/admin/links/L1", headers={"x-admin-key": "wrong"}).status_code == 403


def test_admin_disabled_without_configured_key():
    with patch.object(settings, "ADMIN_API_KEY", ""):
        res = client.get("/admin/links/L1", headers={"x-admin-key": ""})
    assert res.status_code == 403


@patch("app.api.admin_routes.metrics.get_verification_snapshot")
def test_admin_metrics(mock_snapshot):
    mock_snapshot.return_value = {"outcomes": {"verified": 2}, "total": 2}
    res = client.get("/admin/metrics", headers={"x-admin-key": "adm"})
    assert res.status_code == 200
    assert res.json()["total"] == 2
    outcomes = mock_snapshot.call_args.args[0]
    assert "verified" in outcomes and "email_mismatch" in outcomes
