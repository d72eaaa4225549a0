"""Timer Sessions feature module"""

from app.features.timer_sessions.api import router
from app.features.timer_sessions.repository import TimerSessionRepository
from app.features.timer_sessions.service import TimerSessionService
from app.models.timer_session import (
    TimerPhase,
    TimerSession,
    TimerSessionUpdate,
    TimerState,
)
from app.features.timer_sessions.schemas import CreateTimerSessionRequest

__all__ = [
    "router",
    "TimerSessionRepository",
    "TimerSessionService",
    "TimerPhase",
    "TimerSession",
    "TimerSessionUpdate",
    "TimerState",
    "CreateTimerSessionRequest",
]
