# ui/worker.py
import threading

from PySide6.QtCore import QThread, Signal

from core.config import POLL_SECONDS
from core.debug import debug_log
from core.reconciler import Reconciler


class PollWorker(QThread):
    state_changed = Signal(object)   # PlaybackState

    def __init__(self, reconciler: Reconciler, poll_seconds: float = POLL_SECONDS, parent=None):
        super().__init__(parent)
        self.reconciler = reconciler
        self.poll_seconds = poll_seconds
        self._running = True
        self._wake = threading.Event()
        self._last_state = None
        # Anything published to the store reaches the UI, on-demand polls included.
        self._unsubscribe = reconciler.store.subscribe(self._on_published)

    def stop(self):
        self._running = False
        self._wake.set()
        self._unsubscribe()

    def _on_published(self, state):
        if state != self._last_state:
            self._last_state = state
            self.state_changed.emit(state)

    def run(self):
        # First poll happens right away so the label is never left uninitialized.
        while self._running:
            try:
                self.reconciler.poll()
            except Exception as e:
                debug_log(f"Poll failed: {e}")

            self._wake.wait(self.poll_seconds)
            self._wake.clear()
