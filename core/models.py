# core/models.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PlaybackKind(Enum):
    NOT_RUNNING = "not_running"
    PERMISSION_DENIED = "permission_denied"
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


ACTIVE_KINDS = (PlaybackKind.PLAYING, PlaybackKind.PAUSED)


class ScriptCommand(Enum):
    GET_PLAYER_STATE = "get_player_state"
    GET_TRACK_NAME = "get_track_name"
    GET_ARTIST_NAME = "get_artist_name"
    GET_ARTWORK_URL = "get_artwork_url"
    PLAY_PAUSE = "play_pause"
    NEXT = "next"
    PREVIOUS = "previous"
    ACTIVATE = "activate"

    @property
    def returns_value(self) -> bool:
        return self in (
            ScriptCommand.GET_PLAYER_STATE,
            ScriptCommand.GET_TRACK_NAME,
            ScriptCommand.GET_ARTIST_NAME,
            ScriptCommand.GET_ARTWORK_URL,
        )


@dataclass(frozen=True)
class PlaybackState:
    """
    Snapshot of what the menu bar should show.

    Replaced as a whole on every poll. Track, artist and artwork only exist
    while the player is playing or paused.
    """

    kind: PlaybackKind
    track_name: Optional[str] = None
    artist_name: Optional[str] = None
    artwork: Optional[bytes] = None

    def __post_init__(self):
        if self.kind not in ACTIVE_KINDS:
            if self.track_name is not None or self.artist_name is not None or self.artwork is not None:
                raise ValueError(f"{self.kind.name} state cannot carry track details")
        if self.artist_name is not None and self.track_name is None:
            raise ValueError("artist_name requires track_name")

    @property
    def is_active(self) -> bool:
        return self.kind in ACTIVE_KINDS

    @classmethod
    def not_running(cls) -> "PlaybackState":
        return cls(PlaybackKind.NOT_RUNNING)

    @classmethod
    def permission_denied(cls) -> "PlaybackState":
        return cls(PlaybackKind.PERMISSION_DENIED)

    @classmethod
    def stopped(cls) -> "PlaybackState":
        return cls(PlaybackKind.STOPPED)

    @classmethod
    def playing(cls, track_name: str, artist_name: str, artwork: Optional[bytes] = None) -> "PlaybackState":
        return cls(PlaybackKind.PLAYING, track_name, artist_name, artwork)

    @classmethod
    def paused(cls, track_name: str, artist_name: str, artwork: Optional[bytes] = None) -> "PlaybackState":
        return cls(PlaybackKind.PAUSED, track_name, artist_name, artwork)
