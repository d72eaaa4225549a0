"""Request schemas for Timer Sessions API"""

from pydantic import BaseModel, Field, StrictInt

from app.config import DEFAULT_DURATION_SECONDS


class CreateTimerSessionRequest(BaseModel):
    """Request model for creating a timer session. JSON booleans and numeric strings are rejected."""
    duration_seconds: StrictInt = Field(default=DEFAULT_DURATION_SECONDS, gt=0)
