"""
StoryShare Backend — Middleware and Health Tests
==================================================

What:  Request ID handling, the access log line, and the health probe.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from app.middleware.request_id import resolve_request_id


class TestRequestIdResolution:

    @pytest.mark.parametrize("value", ["req-123", "a1b2c3d4", "trace.id_42"])
    def test_well_formed_client_id_is_kept(self, value):
        assert resolve_request_id(value) == value

    @pytest.mark.parametrize(
        "value",
        [None, "", "has space", "line\nbreak", 'quote"', "x" * 65],
    )
    def test_other_values_get_a_fresh_id(self, value):
        rid = resolve_request_id(value)
        assert rid != value
        assert len(rid) == 8

    @pytest.mark.asyncio
    async def test_unsafe_header_is_not_echoed(self, test_client):
        response = await test_client.get(
            "/api/stories/missing", headers={"X-Request-ID": "evil value"}
        )

        rid = response.headers["X-Request-ID"]
        assert rid != "evil value"
        assert response.json()["request_id"] == rid


class TestAccessLog:

    @pytest.mark.asyncio
    async def test_authenticated_request_logs_session_user(self, test_client, caplog):
        await test_client.post(
            "/api/auth/signup",
            json={"name": "Al", "email": "a@x.com", "password": "pw", "username": "al"},
        )
        login = (
            await test_client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw"})
        ).json()
        test_client.cookies.clear()
        caplog.set_level(logging.INFO, logger="storyshare.access")

        await test_client.get(
            "/api/auth/session",
            headers={"Authorization": f"Bearer {login['accessToken']}"},
        )

        lines = [r.getMessage() for r in caplog.records if r.name == "storyshare.access"]
        assert any(
            line.startswith("GET /api/auth/session 200") and f"user={login['userId']}" in line
            for line in lines
        )

    @pytest.mark.asyncio
    async def test_anonymous_request_logged_without_user(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="storyshare.access")

        await test_client.get("/api/stories")

        records = [r for r in caplog.records if r.name == "storyshare.access"]
        assert len(records) == 1
        assert "user=-" in records[0].getMessage()
        assert records[0].levelno == logging.INFO

    @pytest.mark.asyncio
    async def test_client_errors_logged_as_warnings(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="storyshare.access")

        await test_client.get("/api/stories/missing")

        records = [r for r in caplog.records if r.name == "storyshare.access"]
        assert records[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="storyshare.access")

        await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "storyshare.access"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_reports_latency_when_connected(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["databaseLatencyMs"] >= 0

    @pytest.mark.asyncio
    async def test_unreachable_database_is_503(self, test_client):
        with patch("app.routes.health.ping_database", AsyncMock(return_value=None)):
            response = await test_client.get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["databaseLatencyMs"] is None
