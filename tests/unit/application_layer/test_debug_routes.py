"""
Unit Tests for Debug Routes

Tests the /debug HTTP view with TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from memocache.api.app import create_app
from memocache.debug import registry


@pytest.mark.unit
class TestDebugRoutes:
    """Test suite for /debug/caches."""

    @pytest.fixture
    def client(self):
        """Create test client for the debug application."""
        return TestClient(create_app())

    def test_list_empty(self, client):
        response = client.get("/debug/caches")

        assert response.status_code == 200
        assert response.json() == {"caches": {}}

    def test_list_registered(self, client, memoizer):
        registry.register(memoizer, "users")

        response = client.get("/debug/caches")

        data = response.json()
        assert response.status_code == 200
        assert list(data["caches"]) == ["users"]
        assert data["caches"]["users"]["stats"] == {"hit": 0, "miss": 0, "reset": 0, "pending": 0}
        assert data["caches"]["users"]["store"] == "LRUStore"

    def test_get_single_cache(self, client, memoizer):
        registry.register(memoizer, "users")

        response = client.get("/debug/caches/users")

        data = response.json()
        assert response.status_code == 200
        assert data["keycount"] == 0
        assert data["ready"] is True
        assert data["hit_rate"] == 0.0

    def test_unknown_cache_returns_404(self, client):
        response = client.get("/debug/caches/nope")

        assert response.status_code == 404
        assert "nope" in response.json()["detail"]

    def test_lifespan_initializes_registered_memoizers(self, memoizer):
        registry.register(memoizer, "users")

        with TestClient(create_app()) as client:
            response = client.get("/debug/caches/users")

        assert response.status_code == 200
