# core/store.py
import threading
from typing import Callable, List, Optional

from .models import PlaybackState


Subscriber = Callable[[PlaybackState], None]


class PlaybackStore:
    """Holds the one current PlaybackState. The reconciler is the only writer."""

    def __init__(self, initial: Optional[PlaybackState] = None):
        self._state = initial or PlaybackState.not_running()
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []

    @property
    def current(self) -> PlaybackState:
        return self._state

    def publish(self, state: PlaybackState) -> None:
        with self._lock:
            self._state = state
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(state)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe
