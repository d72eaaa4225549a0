"""SQLAlchemy repository for Timer Sessions"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

# SQLAlchemy ORM model
from app.db.models.timer_session import TimerSession as TimerSessionORM

# Pydantic domain models
from app.models.timer_session import TimerSession, TimerSessionUpdate
from app.utils.time_format import ensure_aware_utc, utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("remaining_seconds", "is_running", "is_completed")


class TimerSessionRepository:
    """Repository for timer session rows using SQLAlchemy"""

    def __init__(self, db: AsyncSession):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy async database session
        """
        self.db = db

    async def insert(self, duration_seconds: int) -> TimerSession:
        """
        Create a timer session with the full duration remaining and both flags cleared.

        Args:
            duration_seconds: Total countdown length in seconds

        Returns:
            The created TimerSession domain model
        """
        now = utcnow()
        orm_session = TimerSessionORM(
            duration_seconds=duration_seconds,
            remaining_seconds=duration_seconds,
            is_running=False,
            is_completed=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(orm_session)
        await self._commit("insert timer session")
        await self.db.refresh(orm_session)

        logger.info(f"Timer session {orm_session.id} created with {duration_seconds}s")
        return self._to_domain_model(orm_session)

    async def find_by_id(self, timer_id: int) -> Optional[TimerSession]:
        """Find a timer session by ID, or None if no row matches"""
        orm_session = await self.db.get(TimerSessionORM, timer_id)
        if orm_session is None:
            return None
        return self._to_domain_model(orm_session)

    async def update_fields(
        self,
        timer_id: int,
        update: TimerSessionUpdate
    ) -> Optional[TimerSession]:
        """
        Apply the explicitly provided fields of `update` and refresh updated_at.

        duration_seconds and created_at are never modified. An update with no
        fields still refreshes updated_at.

        Args:
            timer_id: The timer session ID
            update: Partial update; unset fields are left untouched

        Returns:
            The updated TimerSession, or None if the ID does not exist
        """
        orm_session = await self.db.get(TimerSessionORM, timer_id)
        if orm_session is None:
            return None

        changes = update.changes()
        for field, value in changes.items():
            if field in UPDATABLE_FIELDS:
                setattr(orm_session, field, value)
        orm_session.updated_at = self._next_updated_at(orm_session.updated_at)

        await self._commit(f"update timer session {timer_id}")

        logger.debug(f"Timer session {timer_id} updated: {changes}")
        return self._to_domain_model(orm_session)

    async def reset(self, timer_id: int) -> Optional[TimerSession]:
        """
        Restore a timer session to its initial state.

        Returns:
            The reset TimerSession, or None if the ID does not exist
        """
        orm_session = await self.db.get(TimerSessionORM, timer_id)
        if orm_session is None:
            return None

        orm_session.remaining_seconds = orm_session.duration_seconds
        orm_session.is_running = False
        orm_session.is_completed = False
        orm_session.updated_at = self._next_updated_at(orm_session.updated_at)

        await self._commit(f"reset timer session {timer_id}")

        logger.debug(f"Timer session {timer_id} reset to {orm_session.duration_seconds}s")
        return self._to_domain_model(orm_session)

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to {action}: {e}", exc_info=True)
            raise

    @staticmethod
    def _next_updated_at(previous: Optional[datetime]) -> datetime:
        """Current time, nudged past `previous` when the clock has not moved"""
        now = utcnow()
        if previous is None:
            return now
        previous = ensure_aware_utc(previous)
        if now <= previous:
            return previous + timedelta(microseconds=1)
        return now

    def _to_domain_model(self, orm_session: TimerSessionORM) -> TimerSession:
        """
        Convert SQLAlchemy ORM model to Pydantic domain model.

        Args:
            orm_session: SQLAlchemy TimerSession ORM object

        Returns:
            Pydantic TimerSession domain model
        """
        return TimerSession.model_validate(orm_session)
