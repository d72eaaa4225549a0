"""SQLAlchemy ORM models"""

from app.db.models.timer_session import TimerSession

__all__ = ["TimerSession"]
