from unittest.mock import MagicMock, patch

from django.db import DatabaseError


class TestHealthCheck:
    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_reports_database_and_cache(self, client):
        services = client.get("/health").json()["services"]
        assert services["database"]["status"] == "up"
        assert "response_time_ms" in services["database"]
        assert services["cache"]["status"] == "up"

    def test_reports_storage_backend(self, client, settings):
        settings.STORAGE_BACKEND = "memory"
        storage = client.get("/health").json()["services"]["storage"]
        assert storage == {"status": "up", "backend": "memory"}

    def test_cache_outage_returns_503(self, client):
        broken_cache = MagicMock()
        broken_cache.get.return_value = None
        with patch("modules.core.views.cache", broken_cache):
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["services"]["cache"]["status"] == "down"

    def test_database_outage_returns_503(self, client):
        broken = MagicMock()
        broken.__getitem__.return_value.ensure_connection.side_effect = DatabaseError(
            "gone"
        )
        with patch("modules.core.views.connections", broken):
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
