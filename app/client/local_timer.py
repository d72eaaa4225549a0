"""Client-side countdown used while the timer service is unreachable"""
import time
from typing import Callable

from app.config import DEFAULT_DURATION_SECONDS
from app.models.timer_session import TimerPhase, TimerState, timer_phase
from app.utils.time_format import format_time

LOCAL_TIMER_ID = 0


class LocalTimer:
    """
    Countdown state machine driven by its own clock.

    created --start--> running --stop--> paused --start--> running
    running --reaches 0--> completed, any --reset--> created

    `clock` must return monotonically increasing seconds (time.monotonic by default).
    """

    def __init__(
        self,
        duration_seconds: int = DEFAULT_DURATION_SECONDS,
        timer_id: int = LOCAL_TIMER_ID,
        clock: Callable[[], float] = time.monotonic,
    ):
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")

        self.timer_id = timer_id
        self.duration_seconds = duration_seconds
        self.remaining_seconds = duration_seconds
        self.is_running = False
        self.is_completed = False
        self._clock = clock
        self._anchor = clock()

    @property
    def phase(self) -> TimerPhase:
        return timer_phase(
            self.duration_seconds, self.remaining_seconds, self.is_running, self.is_completed
        )

    def start(self) -> None:
        """Start or resume counting down. A completed timer stays completed."""
        if self.is_completed:
            return
        self.is_running = True
        self._anchor = self._clock()

    def stop(self) -> None:
        self.is_running = False

    def reset(self) -> None:
        self.remaining_seconds = self.duration_seconds
        self.is_running = False
        self.is_completed = False
        self._anchor = self._clock()

    def tick(self) -> bool:
        """
        Count down one second.

        Returns:
            True if this tick completed the timer
        """
        if not self.is_running or self.is_completed:
            return False

        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.is_completed = True
            self.is_running = False
            return True
        return False

    def advance(self) -> bool:
        """
        Count down every whole second elapsed on the clock since the last call.

        Fractions of a second carry over to the next call.

        Returns:
            True if the timer completed during this call
        """
        now = self._clock()
        elapsed = int(now - self._anchor)
        if elapsed <= 0:
            return False
        self._anchor += elapsed

        for _ in range(elapsed):
            if self.tick():
                return True
        return False

    def load(self, state: TimerState) -> None:
        """Adopt a state reported by the server and restart the local clock from it."""
        self.timer_id = state.id
        self.duration_seconds = state.duration_seconds
        self.remaining_seconds = state.remaining_seconds
        self.is_running = state.is_running
        self.is_completed = state.is_completed
        self._anchor = self._clock()

    def to_state(self) -> TimerState:
        return TimerState(
            id=self.timer_id,
            duration_seconds=self.duration_seconds,
            remaining_seconds=self.remaining_seconds,
            is_running=self.is_running,
            is_completed=self.is_completed,
            formatted_time=format_time(self.remaining_seconds),
        )
