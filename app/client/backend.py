"""Backend capability used by the timer client"""
from typing import Optional, Protocol

from app.models.timer_session import TimerSession, TimerSessionUpdate, TimerState


class BackendUnavailable(Exception):
    """The timer service could not be reached or failed to answer"""


class TimerBackend(Protocol):
    """
    Operations the client needs from a timer service.

    Implementations return None for an unknown timer ID and raise
    BackendUnavailable when the service cannot be used.
    """

    async def create(self, duration_seconds: int) -> TimerSession:
        ...

    async def get_state(self, timer_id: int) -> Optional[TimerState]:
        ...

    async def start(self, timer_id: int) -> Optional[TimerSession]:
        ...

    async def stop(self, timer_id: int) -> Optional[TimerSession]:
        ...

    async def reset(self, timer_id: int) -> Optional[TimerSession]:
        ...

    async def update(self, timer_id: int, update: TimerSessionUpdate) -> Optional[TimerSession]:
        ...
