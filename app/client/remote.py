"""HTTP implementation of the timer backend"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.client.backend import BackendUnavailable
from app.config import TIMER_API_URL
from app.models.timer_session import TimerSession, TimerSessionUpdate, TimerState

logger = logging.getLogger(__name__)

TIMER_SESSIONS_PATH = "/api/timer-sessions"


class RemoteTimerBackend:
    """
    Talks to the timer API over HTTP.

    404 responses map to None, transport errors and 5xx responses raise
    BackendUnavailable, and 422 responses raise ValueError.
    """

    def __init__(
        self,
        base_url: str = TIMER_API_URL,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def create(self, duration_seconds: int) -> TimerSession:
        data = await self._request("POST", TIMER_SESSIONS_PATH, json={"duration_seconds": duration_seconds})
        if data is None:
            raise BackendUnavailable("Timer API did not return the created session")
        return TimerSession.model_validate(data)

    async def get_session(self, timer_id: int) -> Optional[TimerSession]:
        data = await self._request("GET", f"{TIMER_SESSIONS_PATH}/{timer_id}")
        return TimerSession.model_validate(data) if data is not None else None

    async def get_state(self, timer_id: int) -> Optional[TimerState]:
        data = await self._request("GET", f"{TIMER_SESSIONS_PATH}/{timer_id}/state")
        return TimerState.model_validate(data) if data is not None else None

    async def start(self, timer_id: int) -> Optional[TimerSession]:
        return await self._session_action(timer_id, "start")

    async def stop(self, timer_id: int) -> Optional[TimerSession]:
        return await self._session_action(timer_id, "stop")

    async def reset(self, timer_id: int) -> Optional[TimerSession]:
        return await self._session_action(timer_id, "reset")

    async def update(self, timer_id: int, update: TimerSessionUpdate) -> Optional[TimerSession]:
        data = await self._request("PATCH", f"{TIMER_SESSIONS_PATH}/{timer_id}", json=update.changes())
        return TimerSession.model_validate(data) if data is not None else None

    async def _session_action(self, timer_id: int, action: str) -> Optional[TimerSession]:
        data = await self._request("POST", f"{TIMER_SESSIONS_PATH}/{timer_id}/{action}")
        return TimerSession.model_validate(data) if data is not None else None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=self.timeout,
            ) as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"Timer API request {method} {path} failed: {e}")
            raise BackendUnavailable(f"Timer API unreachable: {e}") from e

        if response.status_code == 404:
            return None

        if response.status_code >= 500:
            logger.warning(f"Timer API error {response.status_code} on {method} {path}: {response.text}")
            raise BackendUnavailable(f"Timer API error {response.status_code}: {response.text}")

        if response.status_code == 422:
            raise ValueError(f"Timer API rejected request: {response.text}")

        response.raise_for_status()
        return response.json()
