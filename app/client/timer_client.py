"""Polling timer client with a local fallback clock"""
import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional

from app.client.backend import BackendUnavailable, TimerBackend
from app.client.local_timer import LocalTimer
from app.config import DEFAULT_DURATION_SECONDS
from app.models.timer_session import TimerSessionUpdate, TimerState

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Backend unavailable - using client-side timer"

CompletionCallback = Callable[[TimerState], None]


class TimerClient:
    """
    Drives one countdown against a TimerBackend.

    While the backend answers, the server state is authoritative: every tick
    reads the state and, with `write_back`, stores the decremented value. When
    a call raises BackendUnavailable the client switches to its LocalTimer,
    sets `warning`, and keeps counting locally. Polls are skipped for
    `retry_interval` seconds after a failure so a slow or dead backend does
    not stall the local countdown; commands still try the backend. The next
    successful call adopts the server state as-is and clears the warning.
    """

    def __init__(
        self,
        backend: TimerBackend,
        duration_seconds: int = DEFAULT_DURATION_SECONDS,
        poll_interval: float = 1.0,
        write_back: bool = True,
        retry_interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.backend = backend
        self.duration_seconds = duration_seconds
        self.poll_interval = poll_interval
        self.write_back = write_back
        self.retry_interval = retry_interval
        self._clock = clock
        self.local = LocalTimer(duration_seconds, clock=clock)
        self.session_id: Optional[int] = None
        self.warning: Optional[str] = None
        self._sleep = sleep
        self._callbacks: List[CompletionCallback] = []
        self._completion_notified = False
        self._retry_at = 0.0

    @property
    def state(self) -> TimerState:
        return self.local.to_state()

    @property
    def in_fallback(self) -> bool:
        return self.warning is not None

    def on_complete(self, callback: CompletionCallback) -> CompletionCallback:
        """Register a callback fired once each time the countdown reaches zero."""
        self._callbacks.append(callback)
        return callback

    async def create(self) -> TimerState:
        """Create the server-side session, or a local-only timer if the backend is down."""
        try:
            session = await self.backend.create(self.duration_seconds)
        except BackendUnavailable as e:
            self.session_id = None
            self.local = LocalTimer(self.duration_seconds, clock=self._clock)
            self._completion_notified = False
            self._enter_fallback("create timer", e)
            return self.state

        self.session_id = session.id
        self._adopt(session.to_state())
        logger.info(f"Created timer session {session.id} ({session.duration_seconds}s)")
        return self.state

    async def start(self) -> TimerState:
        return await self._command("start", self.local.start)

    async def stop(self) -> TimerState:
        return await self._command("stop", self.local.stop)

    async def reset(self) -> TimerState:
        return await self._command("reset", self.local.reset)

    async def tick(self) -> TimerState:
        """Advance the countdown by one poll interval."""
        if self.session_id is not None and not self._backing_off():
            try:
                state = await self._poll()
            except BackendUnavailable as e:
                self._enter_fallback("poll timer state", e)
            else:
                if state is not None:
                    self._adopt(state)
                    return self.state
                self._enter_fallback("poll timer state", f"session {self.session_id} not found")

        self.local.advance()
        self._notify_completion()
        return self.state

    async def run(
        self,
        on_tick: Optional[Callable[[TimerState], None]] = None,
        max_ticks: Optional[int] = None,
    ) -> TimerState:
        """Tick once per poll_interval until the timer stops or completes."""
        ticks = 0
        while self.local.is_running and not self.local.is_completed:
            if max_ticks is not None and ticks >= max_ticks:
                break
            await self._sleep(self.poll_interval)
            state = await self.tick()
            ticks += 1
            if on_tick is not None:
                on_tick(state)
        return self.state

    async def _poll(self) -> Optional[TimerState]:
        state = await self.backend.get_state(self.session_id)
        if state is None or not self.write_back:
            return state
        if not state.is_running or state.is_completed:
            return state

        session = await self.backend.update(
            self.session_id,
            TimerSessionUpdate(remaining_seconds=max(0, state.remaining_seconds - 1)),
        )
        return session.to_state() if session is not None else None

    async def _command(self, action: str, local_action: Callable[[], None]) -> TimerState:
        if self.session_id is not None:
            try:
                session = await getattr(self.backend, action)(self.session_id)
            except BackendUnavailable as e:
                self._enter_fallback(f"{action} timer", e)
            else:
                if session is not None:
                    self._adopt(session.to_state())
                    return self.state
                self._enter_fallback(f"{action} timer", f"session {self.session_id} not found")

        local_action()
        self._notify_completion()
        return self.state

    def _adopt(self, state: TimerState) -> None:
        if self.warning is not None:
            logger.info("Timer backend reachable again")
        self.warning = None
        self.local.load(state)
        self._notify_completion()

    def _backing_off(self) -> bool:
        return self.in_fallback and self._clock() < self._retry_at

    def _enter_fallback(self, action: str, error) -> None:
        self._retry_at = self._clock() + self.retry_interval
        if self.warning is None:
            logger.warning(f"Failed to {action}: {error}; switching to client-side timer")
        self.warning = FALLBACK_WARNING

    def _notify_completion(self) -> None:
        if not self.local.is_completed:
            self._completion_notified = False
            return
        if self._completion_notified:
            return

        self._completion_notified = True
        state = self.state
        for callback in self._callbacks:
            callback(state)
