"""
Integration Tests for Health Endpoints.
"""

from unittest.mock import MagicMock

from httpx import AsyncClient


class TestHealth:
    """Tests for /, /health, /health/ready and /health/detailed."""

    async def test_root_welcome(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to the XNote API"}

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_readiness_pings_database(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"

    async def test_detailed_reports_scheduler_disabled_without_lifespan(self, client: AsyncClient):
        response = await client.get("/health/detailed")

        body = response.json()
        assert response.status_code == 200
        assert body["application"]["name"] == "XNote API"
        assert body["trash_scheduler"] == {"status": "disabled"}

    async def test_detailed_reports_scheduler_settings(self, app, client: AsyncClient):
        scheduler = MagicMock()
        scheduler.running = True
        scheduler.retention_days = 7
        scheduler.purge_hour = 2
        scheduler.purge_minute = 0
        app.state.trash_scheduler = scheduler

        body = (await client.get("/health/detailed")).json()

        assert body["trash_scheduler"] == {
            "status": "running",
            "retention_days": 7,
            "purge_time": "02:00",
        }

    async def test_response_carries_request_id(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "req-1"})

        assert response.headers["X-Request-ID"] == "req-1"
