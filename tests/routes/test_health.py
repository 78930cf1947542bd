"""
Tests for the public /health endpoint.
"""

from fastapi.testclient import TestClient

from media_recommender.main import app

client = TestClient(app)


def test_health_is_public():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "media-recommender-backend"}
