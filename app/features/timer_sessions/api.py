"""Timer Sessions API endpoints"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import get_db
from app.features.timer_sessions.service import TimerSessionService
from app.models.timer_session import TimerSession, TimerSessionUpdate, TimerState
from app.features.timer_sessions.schemas import CreateTimerSessionRequest

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/timer-sessions", tags=["timer-sessions"])


def _not_found(timer_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Timer session {timer_id} not found")


def _storage_failure(action: str, error: Exception) -> HTTPException:
    logger.error(f"Failed to {action}: {error}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}: {str(error)}")


@router.post("", response_model=TimerSession, status_code=status.HTTP_201_CREATED)
async def create_timer_session(
    request: CreateTimerSessionRequest = CreateTimerSessionRequest(),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new timer session.

    The session starts stopped with the full duration remaining
    (240 seconds unless the request says otherwise).
    """
    try:
        service = TimerSessionService(db)
        return await service.create_session(request.duration_seconds)

    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError as e:
        raise _storage_failure("create timer session", e)


@router.get("/{timer_id}", response_model=TimerSession)
async def get_timer_session(
    timer_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get a timer session by ID."""
    try:
        session = await TimerSessionService(db).get_session(timer_id)
    except SQLAlchemyError as e:
        raise _storage_failure("get timer session", e)

    if session is None:
        raise _not_found(timer_id)
    return session


@router.patch("/{timer_id}", response_model=TimerSession)
async def update_timer_session(
    timer_id: int,
    update: TimerSessionUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update a timer session.

    Any combination of remaining_seconds, is_running and is_completed may be sent.
    Writing remaining_seconds derives is_completed, and reaching 0 stops the timer.

    Raises:
        404: Timer session not found
        422: remaining_seconds outside [0, duration_seconds]
    """
    try:
        session = await TimerSessionService(db).update_session(timer_id, update)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SQLAlchemyError as e:
        raise _storage_failure("update timer session", e)

    if session is None:
        raise _not_found(timer_id)
    return session


@router.post("/{timer_id}/start", response_model=TimerSession)
async def start_timer(
    timer_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Start or resume a timer. Completed timers are returned unchanged."""
    try:
        session = await TimerSessionService(db).start_timer(timer_id)
    except SQLAlchemyError as e:
        raise _storage_failure("start timer", e)

    if session is None:
        raise _not_found(timer_id)
    return session


@router.post("/{timer_id}/stop", response_model=TimerSession)
async def stop_timer(
    timer_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Pause a timer."""
    try:
        session = await TimerSessionService(db).stop_timer(timer_id)
    except SQLAlchemyError as e:
        raise _storage_failure("stop timer", e)

    if session is None:
        raise _not_found(timer_id)
    return session


@router.post("/{timer_id}/reset", response_model=TimerSession)
async def reset_timer(
    timer_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Reset a timer to its full duration, stopped and not completed."""
    try:
        session = await TimerSessionService(db).reset_timer(timer_id)
    except SQLAlchemyError as e:
        raise _storage_failure("reset timer", e)

    if session is None:
        raise _not_found(timer_id)
    return session


@router.get("/{timer_id}/state", response_model=TimerState)
async def get_timer_state(
    timer_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get the timer state with remaining time formatted as MM:SS."""
    try:
        state = await TimerSessionService(db).get_state(timer_id)
    except SQLAlchemyError as e:
        raise _storage_failure("get timer state", e)

    if state is None:
        raise _not_found(timer_id)
    return state
