"""Tests for RemoteTimerBackend against the ASGI app and mocked transports."""
import httpx
import pytest

from app.client import BackendUnavailable, RemoteTimerBackend, TimerClient
from app.models.timer_session import TimerSessionUpdate


@pytest.fixture
def remote(asgi_transport):
    return RemoteTimerBackend(base_url="http://test", transport=asgi_transport)


def _failing_transport(exc: Exception) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc
    return httpx.MockTransport(handler)


class TestAgainstApp:
    async def test_create_and_get_state(self, remote):
        session = await remote.create(665)
        assert session.remaining_seconds == 665
        assert session.created_at.tzinfo is not None

        state = await remote.get_state(session.id)
        assert state.formatted_time == "11:05"

    async def test_start_stop_reset_update(self, remote):
        session = await remote.create(90)

        started = await remote.start(session.id)
        assert started.is_running is True
        assert started.updated_at > session.updated_at

        updated = await remote.update(session.id, TimerSessionUpdate(remaining_seconds=45))
        assert updated.remaining_seconds == 45

        stopped = await remote.stop(session.id)
        assert stopped.is_running is False

        reset = await remote.reset(session.id)
        assert reset.remaining_seconds == 90
        assert reset.created_at == session.created_at

        fetched = await remote.get_session(session.id)
        assert fetched == reset

    async def test_not_found_maps_to_none(self, remote):
        assert await remote.get_state(12345) is None
        assert await remote.get_session(12345) is None
        assert await remote.start(12345) is None
        assert await remote.stop(12345) is None
        assert await remote.reset(12345) is None
        assert await remote.update(12345, TimerSessionUpdate(is_running=False)) is None

    async def test_validation_error(self, remote):
        session = await remote.create(30)
        with pytest.raises(ValueError):
            await remote.update(session.id, TimerSessionUpdate(remaining_seconds=31))

    async def test_client_end_to_end(self, remote, clock):
        async def no_sleep(seconds: float) -> None:
            return None

        client = TimerClient(remote, duration_seconds=2, clock=clock, sleep=no_sleep)
        await client.create()
        await client.start()
        final = await client.run()

        assert final.is_completed is True
        assert final.formatted_time == "00:00"

        state = await remote.get_state(client.session_id)
        assert state.is_completed is True
        assert state.is_running is False


class TestUnavailable:
    async def test_connection_error(self):
        remote = RemoteTimerBackend(
            base_url="http://timer.invalid",
            transport=_failing_transport(httpx.ConnectError("connection refused")),
        )
        with pytest.raises(BackendUnavailable):
            await remote.get_state(1)

    async def test_timeout(self):
        remote = RemoteTimerBackend(
            base_url="http://timer.invalid",
            transport=_failing_transport(httpx.ReadTimeout("timed out")),
        )
        with pytest.raises(BackendUnavailable):
            await remote.start(1)

    async def test_server_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"detail": "Failed"}))
        remote = RemoteTimerBackend(base_url="http://timer.invalid", transport=transport)
        with pytest.raises(BackendUnavailable):
            await remote.create(60)

    async def test_client_falls_back(self, clock):
        remote = RemoteTimerBackend(
            base_url="http://timer.invalid",
            transport=_failing_transport(httpx.ConnectError("connection refused")),
        )
        client = TimerClient(remote, duration_seconds=240, clock=clock)

        state = await client.create()
        assert client.in_fallback is True
        assert state.formatted_time == "04:00"
