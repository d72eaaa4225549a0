"""SQLAlchemy ORM model for timer_sessions table"""

from sqlalchemy import Column, Integer, DateTime, Boolean
from sqlalchemy.sql import func

from app.db.base import Base


class TimerSession(Base):
    """
    SQLAlchemy ORM model for the timer_sessions table.
    One row per countdown timer; rows are never deleted.
    """
    __tablename__ = "timer_sessions"

    # Primary key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Countdown values (seconds)
    duration_seconds = Column(Integer, nullable=False)
    remaining_seconds = Column(Integer, nullable=False)

    # Flags
    is_running = Column(Boolean, default=False, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)

    # Timestamps (written by the repository, server defaults as a fallback)
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<TimerSession(id={self.id}, remaining={self.remaining_seconds}/{self.duration_seconds}, "
            f"running={self.is_running}, completed={self.is_completed})>"
        )
