# core/formatter.py
from typing import List

from PySide6.QtCore import QTextBoundaryFinder

from .config import APP_NAME, COMPACT_MAX_CHARS, ICON_ONLY_THRESHOLD, TARGET_APP_NAME
from .models import PlaybackKind, PlaybackState


PAUSE_MARKER = "⏸ "
ELLIPSIS = "…"
IDLE_LABEL = f"♫ {APP_NAME}"
PERMISSION_LABEL = f"{TARGET_APP_NAME}: Permission needed"

_DETAIL_SENTENCES = {
    PlaybackKind.NOT_RUNNING: f"{TARGET_APP_NAME} not running.",
    PlaybackKind.STOPPED: "Player is stopped.",
    PlaybackKind.PERMISSION_DENIED: (
        f"Allow {APP_NAME} to control {TARGET_APP_NAME} in System Settings → "
        f"Privacy & Security → Automation."
    ),
}


def graphemes(text: str) -> List[str]:
    """Split text into user-perceived characters (grapheme clusters)."""
    if not text:
        return []
    # Qt reports boundaries in UTF-16 code units.
    units = text.encode("utf-16-le")
    finder = QTextBoundaryFinder(QTextBoundaryFinder.BoundaryType.Grapheme, text)
    clusters = []
    start = 0
    end = finder.toNextBoundary()
    while end != -1:
        clusters.append(units[start * 2:end * 2].decode("utf-16-le"))
        start = end
        end = finder.toNextBoundary()
    return clusters


def truncated(text: str, limit: int) -> str:
    chars = graphemes(text)
    if len(chars) <= limit:
        return text
    return "".join(chars[:limit]) + ELLIPSIS


def full_label(state: PlaybackState) -> str:
    if state.is_active:
        title = f"{state.track_name} – {state.artist_name}"
        return PAUSE_MARKER + title if state.kind is PlaybackKind.PAUSED else title
    if state.kind is PlaybackKind.PERMISSION_DENIED:
        return PERMISSION_LABEL
    return IDLE_LABEL


def _strip_pause_marker(label: str) -> str:
    # Every occurrence goes, including any inside the track title.
    return label.replace(PAUSE_MARKER, "")


def should_use_icon_only(state: PlaybackState) -> bool:
    return len(graphemes(_strip_pause_marker(full_label(state)))) > ICON_ONLY_THRESHOLD


def compact_label(state: PlaybackState, max_chars: int = COMPACT_MAX_CHARS) -> str:
    return truncated(_strip_pause_marker(full_label(state)), max_chars)


def state_text(state: PlaybackState) -> str:
    if state.kind is PlaybackKind.PLAYING:
        return "Playing"
    if state.kind is PlaybackKind.PAUSED:
        return "Paused"
    return "—"


def detail_text(state: PlaybackState) -> str:
    if state.is_active:
        return f"State: {state_text(state)}\nTrack: {state.track_name}\nArtist: {state.artist_name}"
    return _DETAIL_SENTENCES[state.kind]


# Popover rows

def title_text(state: PlaybackState) -> str:
    return _strip_pause_marker(full_label(state))


def artist_text(state: PlaybackState) -> str:
    return state.artist_name if state.is_active else "—"
