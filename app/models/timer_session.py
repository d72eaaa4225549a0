"""Timer session domain models"""

from pydantic import BaseModel, Field, StrictBool, StrictInt, field_validator
from enum import Enum
from typing import Optional
from datetime import datetime

from app.utils.time_format import ensure_aware_utc, format_time


class TimerPhase(str, Enum):
    """Lifecycle phase of a countdown timer"""
    CREATED = "created"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


def timer_phase(
    duration_seconds: int,
    remaining_seconds: int,
    is_running: bool,
    is_completed: bool,
) -> TimerPhase:
    """Derive the lifecycle phase from the stored flags and counters"""
    if is_completed:
        return TimerPhase.COMPLETED
    if is_running:
        return TimerPhase.RUNNING
    if remaining_seconds == duration_seconds:
        return TimerPhase.CREATED
    return TimerPhase.PAUSED


class TimerState(BaseModel):
    """Timer state view with the display string derived from remaining_seconds"""
    id: int
    duration_seconds: int
    remaining_seconds: int
    is_running: bool
    is_completed: bool
    formatted_time: str  # MM:SS format


class TimerSessionBase(BaseModel):
    """Base timer session fields"""
    duration_seconds: int
    remaining_seconds: int
    is_running: bool = False
    is_completed: bool = False

    def phase(self) -> TimerPhase:
        return timer_phase(
            self.duration_seconds, self.remaining_seconds, self.is_running, self.is_completed
        )


class TimerSessionUpdate(BaseModel):
    """Timer session update model - all fields optional, only the ones sent are applied"""
    remaining_seconds: Optional[StrictInt] = Field(default=None, ge=0)
    is_running: Optional[StrictBool] = None
    is_completed: Optional[StrictBool] = None

    def changes(self) -> dict:
        """Fields explicitly provided by the caller, without nulls"""
        return self.model_dump(exclude_unset=True, exclude_none=True)

    def with_completion_policy(self) -> "TimerSessionUpdate":
        """
        Derive the completion flags from remaining_seconds when it is being written.

        - remaining_seconds == 0 -> is_completed=True, is_running=False
        - remaining_seconds > 0  -> is_completed=False
        Flag-only updates are returned unchanged.
        """
        if self.remaining_seconds is None:
            return self

        normalized = self.changes()
        normalized["is_completed"] = self.remaining_seconds == 0
        if self.remaining_seconds == 0:
            normalized["is_running"] = False
        return TimerSessionUpdate(**normalized)


class TimerSession(TimerSessionBase):
    """Complete timer session domain model"""
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        """SQLite returns naive datetimes; expose everything as UTC"""
        return ensure_aware_utc(value)

    def to_state(self) -> TimerState:
        return TimerState(
            id=self.id,
            duration_seconds=self.duration_seconds,
            remaining_seconds=self.remaining_seconds,
            is_running=self.is_running,
            is_completed=self.is_completed,
            formatted_time=format_time(self.remaining_seconds),
        )
