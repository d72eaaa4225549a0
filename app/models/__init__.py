"""Domain models for the application"""
from .timer_session import TimerPhase, TimerSession, TimerSessionUpdate, TimerState, timer_phase

__all__ = [
    'TimerPhase', 'TimerSession', 'TimerSessionUpdate', 'TimerState', 'timer_phase',
]
