"""In-memory timer backend for tests and offline use"""
from datetime import timedelta
from typing import Dict, Optional

from app.client.backend import BackendUnavailable
from app.models.timer_session import TimerSession, TimerSessionUpdate, TimerState
from app.utils.time_format import utcnow


class InMemoryTimerBackend:
    """
    Dict-backed stand-in for the timer API with the same rules as the service:
    remaining_seconds drives completion, completed timers ignore start, and
    updated_at strictly increases on every write.

    Set `available = False` to make every call raise BackendUnavailable.
    """

    def __init__(self):
        self.sessions: Dict[int, TimerSession] = {}
        self.available = True
        self._next_id = 1

    async def create(self, duration_seconds: int) -> TimerSession:
        self._check_available()
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

        now = utcnow()
        session = TimerSession(
            id=self._next_id,
            duration_seconds=duration_seconds,
            remaining_seconds=duration_seconds,
            is_running=False,
            is_completed=False,
            created_at=now,
            updated_at=now,
        )
        self.sessions[session.id] = session
        self._next_id += 1
        return session

    async def get_session(self, timer_id: int) -> Optional[TimerSession]:
        self._check_available()
        return self.sessions.get(timer_id)

    async def get_state(self, timer_id: int) -> Optional[TimerState]:
        self._check_available()
        session = self.sessions.get(timer_id)
        return session.to_state() if session else None

    async def start(self, timer_id: int) -> Optional[TimerSession]:
        self._check_available()
        session = self.sessions.get(timer_id)
        if session is None or session.is_completed:
            return session
        return self._write(session, {"is_running": True})

    async def stop(self, timer_id: int) -> Optional[TimerSession]:
        self._check_available()
        session = self.sessions.get(timer_id)
        if session is None:
            return None
        return self._write(session, {"is_running": False})

    async def reset(self, timer_id: int) -> Optional[TimerSession]:
        self._check_available()
        session = self.sessions.get(timer_id)
        if session is None:
            return None
        return self._write(session, {
            "remaining_seconds": session.duration_seconds,
            "is_running": False,
            "is_completed": False,
        })

    async def update(self, timer_id: int, update: TimerSessionUpdate) -> Optional[TimerSession]:
        self._check_available()
        session = self.sessions.get(timer_id)
        if session is None:
            return None
        if update.remaining_seconds is not None and update.remaining_seconds > session.duration_seconds:
            raise ValueError(
                f"remaining_seconds must be between 0 and {session.duration_seconds}, "
                f"got {update.remaining_seconds}"
            )
        return self._write(session, update.with_completion_policy().changes())

    def _write(self, session: TimerSession, changes: dict) -> TimerSession:
        now = utcnow()
        if now <= session.updated_at:
            now = session.updated_at + timedelta(microseconds=1)
        updated = session.model_copy(update={**changes, "updated_at": now})
        self.sessions[session.id] = updated
        return updated

    def _check_available(self) -> None:
        if not self.available:
            raise BackendUnavailable("In-memory timer backend is offline")
