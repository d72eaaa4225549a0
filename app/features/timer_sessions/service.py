"""Business logic for Timer Sessions"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import DEFAULT_DURATION_SECONDS
from app.models.timer_session import TimerSession, TimerSessionUpdate, TimerState
from app.features.timer_sessions.repository import TimerSessionRepository

logger = logging.getLogger(__name__)


class TimerSessionService:
    """Service layer for timer session business logic"""

    def __init__(self, db: AsyncSession):
        self.repository = TimerSessionRepository(db)

    async def create_session(self, duration_seconds: int = DEFAULT_DURATION_SECONDS) -> TimerSession:
        """
        Create a new timer session.

        Raises:
            ValueError: If duration_seconds is not a positive integer
        """
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int):
            raise ValueError(f"duration_seconds must be an integer, got {duration_seconds!r}")
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

        return await self.repository.insert(duration_seconds)

    async def get_session(self, timer_id: int) -> Optional[TimerSession]:
        return await self.repository.find_by_id(timer_id)

    async def update_session(
        self,
        timer_id: int,
        update: TimerSessionUpdate
    ) -> Optional[TimerSession]:
        """
        Partially update a timer session.

        Business rules:
        - Only remaining_seconds, is_running and is_completed can change
        - remaining_seconds must stay within [0, duration_seconds]
        - Writing remaining_seconds derives is_completed; reaching 0 also stops the timer

        Returns:
            The updated session, or None if it does not exist

        Raises:
            ValueError: If remaining_seconds is outside [0, duration_seconds]
        """
        if update.remaining_seconds is not None:
            existing = await self.repository.find_by_id(timer_id)
            if existing is None:
                return None
            if not 0 <= update.remaining_seconds <= existing.duration_seconds:
                raise ValueError(
                    f"remaining_seconds must be between 0 and {existing.duration_seconds}, "
                    f"got {update.remaining_seconds}"
                )

        updated = await self.repository.update_fields(timer_id, update.with_completion_policy())
        if updated is not None and updated.is_completed and update.remaining_seconds == 0:
            logger.info(f"Timer session {timer_id} completed")
        return updated

    async def start_timer(self, timer_id: int) -> Optional[TimerSession]:
        """
        Start (or resume) a timer session.

        A completed session is returned unchanged; it has to be reset before it
        can run again.
        """
        existing = await self.repository.find_by_id(timer_id)
        if existing is None:
            return None
        if existing.is_completed:
            logger.info(f"Timer session {timer_id} is completed; start ignored")
            return existing

        return await self.repository.update_fields(timer_id, TimerSessionUpdate(is_running=True))

    async def stop_timer(self, timer_id: int) -> Optional[TimerSession]:
        """Pause a timer session. Stopping a stopped timer is allowed."""
        return await self.repository.update_fields(timer_id, TimerSessionUpdate(is_running=False))

    async def reset_timer(self, timer_id: int) -> Optional[TimerSession]:
        """Restore the full duration and clear both flags, whatever the current state."""
        return await self.repository.reset(timer_id)

    async def get_state(self, timer_id: int) -> Optional[TimerState]:
        session = await self.repository.find_by_id(timer_id)
        if session is None:
            return None
        return session.to_state()
