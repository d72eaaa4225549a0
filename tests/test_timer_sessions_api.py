"""Tests for the timer sessions HTTP API."""
import logging
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.db import get_db
from app.main import app

BASE = "/api/timer-sessions"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client, duration=None) -> dict:
    body = {} if duration is None else {"duration_seconds": duration}
    response = await client.post(BASE, json=body)
    assert response.status_code == 201
    return response.json()


class TestCreate:
    async def test_create_with_duration(self, client):
        data = await _create(client, 90)
        assert data["duration_seconds"] == 90
        assert data["remaining_seconds"] == 90
        assert data["is_running"] is False
        assert data["is_completed"] is False
        assert data["created_at"] == data["updated_at"]

    async def test_default_duration(self, client):
        data = await _create(client)
        assert data["duration_seconds"] == 240

    async def test_create_without_body(self, client):
        response = await client.post(BASE)
        assert response.status_code == 201
        assert response.json()["duration_seconds"] == 240

    @pytest.mark.parametrize("duration", [0, -1, 2.5, "soon", True, "60"])
    async def test_invalid_duration(self, client, duration):
        response = await client.post(BASE, json={"duration_seconds": duration})
        assert response.status_code == 422


class TestLifecycle:
    async def test_get_session(self, client):
        created = await _create(client, 120)
        response = await client.get(f"{BASE}/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    async def test_start_stop_reset(self, client):
        created = await _create(client, 120)
        timer_id = created["id"]

        started = (await client.post(f"{BASE}/{timer_id}/start")).json()
        assert started["is_running"] is True
        assert _ts(started["updated_at"]) > _ts(created["updated_at"])

        await client.patch(f"{BASE}/{timer_id}", json={"remaining_seconds": 100})
        stopped = (await client.post(f"{BASE}/{timer_id}/stop")).json()
        assert stopped["is_running"] is False
        assert stopped["remaining_seconds"] == 100

        reset = (await client.post(f"{BASE}/{timer_id}/reset")).json()
        assert reset["remaining_seconds"] == 120
        assert reset["is_running"] is False
        assert reset["is_completed"] is False
        assert reset["created_at"] == created["created_at"]

    async def test_end_to_end(self, client):
        created = await _create(client, 240)
        timer_id = created["id"]
        await client.post(f"{BASE}/{timer_id}/start")

        state = (await client.get(f"{BASE}/{timer_id}/state")).json()
        assert state == {
            "id": timer_id,
            "duration_seconds": 240,
            "remaining_seconds": 240,
            "is_running": True,
            "is_completed": False,
            "formatted_time": "04:00",
        }

        response = await client.patch(
            f"{BASE}/{timer_id}",
            json={"remaining_seconds": 0, "is_completed": True, "is_running": False},
        )
        assert response.status_code == 200

        state = (await client.get(f"{BASE}/{timer_id}/state")).json()
        assert state["formatted_time"] == "00:00"
        assert state["is_completed"] is True
        assert state["is_running"] is False


class TestUpdate:
    async def test_partial_update(self, client):
        created = await _create(client, 300)
        response = await client.patch(f"{BASE}/{created['id']}", json={"remaining_seconds": 150})
        assert response.status_code == 200

        data = response.json()
        assert data["remaining_seconds"] == 150
        assert data["duration_seconds"] == 300
        assert data["is_running"] is False
        assert data["is_completed"] is False
        assert _ts(data["updated_at"]) > _ts(created["updated_at"])

    async def test_negative_remaining_rejected(self, client):
        created = await _create(client, 300)
        response = await client.patch(f"{BASE}/{created['id']}", json={"remaining_seconds": -1})
        assert response.status_code == 422

    async def test_remaining_above_duration_rejected(self, client):
        created = await _create(client, 300)
        response = await client.patch(f"{BASE}/{created['id']}", json={"remaining_seconds": 301})
        assert response.status_code == 422
        assert "between 0 and 300" in response.json()["detail"]

    @pytest.mark.parametrize(
        "body",
        [
            {"remaining_seconds": False},
            {"remaining_seconds": "150"},
            {"remaining_seconds": 150.0},
            {"is_running": "yes"},
            {"is_completed": 1},
        ],
    )
    async def test_coercible_values_rejected(self, client, body):
        created = await _create(client, 300)
        response = await client.patch(f"{BASE}/{created['id']}", json=body)
        assert response.status_code == 422

        unchanged = (await client.get(f"{BASE}/{created['id']}")).json()
        assert unchanged["remaining_seconds"] == 300
        assert unchanged["is_running"] is False
        assert unchanged["is_completed"] is False


class TestNotFound:
    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("GET", "/999", None),
            ("GET", "/999/state", None),
            ("PATCH", "/999", {"is_running": True}),
            ("POST", "/999/start", None),
            ("POST", "/999/stop", None),
            ("POST", "/999/reset", None),
        ],
    )
    async def test_unknown_id(self, client, method, path, body):
        response = await client.request(method, f"{BASE}{path}", json=body)
        assert response.status_code == 404
        assert response.json()["detail"] == "Timer session 999 not found"


class TestStorageFailure:
    async def test_database_error_returns_500(self, client, session_factory):
        async def failing_db():
            async with session_factory() as session:
                session.get = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("database is down")))
                yield session

        app.dependency_overrides[get_db] = failing_db

        response = await client.get(f"{BASE}/1/state")
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Failed to get timer state")


class TestHealth:
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Countdown Timer API"

    async def test_health(self, client):
        response = await client.get("/api/health/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "countdown-timer"
        assert "timestamp" in data

    async def test_pool(self, client):
        response = await client.get("/api/health/pool")
        assert response.status_code == 200
        assert response.json()["status"] in ("healthy", "warning", "critical")

    async def test_pool_logs_utilization(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.db.session"):
            response = await client.get("/api/health/pool")

        data = response.json()
        assert data["total_capacity"] == data["pool_size"] + data["max_overflow"]
        assert any("[health check]" in record.getMessage() for record in caplog.records)
