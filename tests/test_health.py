# tests/test_health.py
from fastapi.testclient import TestClient
from session_scheduler.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["app"]
    assert data["env"]
