from fastapi.testclient import TestClient

from moneymap import __version__
from moneymap.main import app

client = TestClient(app)


def test_health_returns_200():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__


def test_unknown_route_returns_404():
    response = client.get("/api/unknown")
    assert response.status_code == 404
