from fastapi.testclient import TestClient

from apps.api.main import app
from apps.api.routes import notifications as notifications_module


def test_settings_round_trip(monkeypatch, tmp_path):
    path = str(tmp_path / "notifications.json")
    monkeypatch.setattr(notifications_module, "_settings_path", lambda: path)

    client = TestClient(app)

    defaults = client.get("/notifications/settings")
    assert defaults.status_code == 200
    assert defaults.json()["lead_minutes"] == 15
    assert defaults.json()["push_enabled"] is False

    put_resp = client.put(
        "/notifications/settings",
        json={"email_enabled": True, "email_address": "owner@example.com", "lead_minutes": 30},
    )
    assert put_resp.status_code == 200
    assert client.get("/notifications/settings").json()["lead_minutes"] == 30


def test_test_notification_requires_a_channel(monkeypatch, tmp_path):
    path = str(tmp_path / "notifications.json")
    monkeypatch.setattr(notifications_module, "_settings_path", lambda: path)

    client = TestClient(app)
    response = client.post("/notifications/test")
    assert response.status_code == 400
    assert "no notification channel" in response.json()["detail"]


def test_test_notification_reports_channel_failure(monkeypatch, tmp_path):
    path = str(tmp_path / "notifications.json")
    monkeypatch.setattr(notifications_module, "_settings_path", lambda: path)
    monkeypatch.delenv("PUSH_WEBHOOK_URL", raising=False)

    client = TestClient(app)
    client.put("/notifications/settings", json={"push_enabled": True})
    response = client.post("/notifications/test")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["outcomes"][0]["channel"] == "push"
    assert "PUSH_WEBHOOK_URL" in body["outcomes"][0]["error"]
