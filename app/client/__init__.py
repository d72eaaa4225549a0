"""Timer client: backends, local fallback timer and polling client"""

from app.client.backend import BackendUnavailable, TimerBackend
from app.client.local_timer import LocalTimer
from app.client.memory import InMemoryTimerBackend
from app.client.remote import RemoteTimerBackend
from app.client.timer_client import FALLBACK_WARNING, TimerClient

__all__ = [
    "BackendUnavailable",
    "TimerBackend",
    "LocalTimer",
    "InMemoryTimerBackend",
    "RemoteTimerBackend",
    "FALLBACK_WARNING",
    "TimerClient",
]
