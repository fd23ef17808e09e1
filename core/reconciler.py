# core/reconciler.py
import threading
from typing import Callable, Optional

from .applescript import BridgeError, PermissionDeniedError, ScriptBridge, ScriptExecutionError
from .artwork import ArtworkFetcher
from .config import UNKNOWN_ARTIST, UNKNOWN_TRACK
from .debug import debug_log
from .models import PlaybackState, ScriptCommand
from .process import is_running
from .store import PlaybackStore


# AppleScript's null value comes back as this text when coerced to string.
_MISSING_VALUES = ("", "missing value")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if value.lower() in _MISSING_VALUES:
        return None
    return value


class Reconciler:
    """
    Turns a round of bridge calls into one PlaybackState and publishes it.

    Order matters: process check first (works without automation consent),
    then player state, then the per-track fields. A permission failure on
    the player state ends the cycle without any further Apple events.
    """

    def __init__(
        self,
        bridge: Optional[ScriptBridge] = None,
        store: Optional[PlaybackStore] = None,
        running_check: Callable[[], bool] = is_running,
        artwork: Optional[ArtworkFetcher] = None,
    ):
        self.bridge = bridge or ScriptBridge()
        self.store = store or PlaybackStore()
        self._running_check = running_check
        self._artwork = artwork or ArtworkFetcher()
        self._cycle_lock = threading.Lock()

    def poll(self) -> PlaybackState:
        # A cycle already in flight wins; callers get the last published state.
        if not self._cycle_lock.acquire(blocking=False):
            debug_log("Poll skipped, previous cycle still running")
            return self.store.current
        try:
            state = self._reconcile()
            self.store.publish(state)
            return state
        finally:
            self._cycle_lock.release()

    def _reconcile(self) -> PlaybackState:
        if not self._running_check():
            return PlaybackState.not_running()

        try:
            player_state = _clean(self.bridge.execute(ScriptCommand.GET_PLAYER_STATE))
        except PermissionDeniedError:
            return PlaybackState.permission_denied()
        except ScriptExecutionError as e:
            debug_log(f"Player state unavailable, treating as stopped: {e}")
            return PlaybackState.stopped()

        player_state = (player_state or "").lower()
        if player_state not in ("playing", "paused"):
            if player_state != "stopped":
                debug_log(f"Unrecognized player state {player_state!r}")
            return PlaybackState.stopped()

        track = self._lookup(ScriptCommand.GET_TRACK_NAME) or UNKNOWN_TRACK
        artist = self._lookup(ScriptCommand.GET_ARTIST_NAME) or UNKNOWN_ARTIST
        artwork = self._artwork.fetch(self._lookup(ScriptCommand.GET_ARTWORK_URL))

        if player_state == "paused":
            return PlaybackState.paused(track, artist, artwork)
        return PlaybackState.playing(track, artist, artwork)

    def _lookup(self, command: ScriptCommand) -> Optional[str]:
        try:
            return _clean(self.bridge.execute(command))
        except BridgeError as e:
            debug_log(f"{command.name} failed: {e}")
            return None
