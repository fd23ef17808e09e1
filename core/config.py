# core/config.py

APP_NAME = "SpotBar"

# Target player. Addressed by bundle id everywhere, the display name can be localized.
TARGET_APP_NAME = "Spotify"
TARGET_BUNDLE_ID = "com.spotify.client"

POLL_SECONDS = 1.5

SCRIPT_TIMEOUT_SECONDS = 5
PROCESS_CHECK_TIMEOUT_SECONDS = 2
ARTWORK_TIMEOUT_SECONDS = 2

# Menu bar label sizing
ICON_ONLY_THRESHOLD = 28
COMPACT_MAX_CHARS = 24

UNKNOWN_TRACK = "Unknown Track"
UNKNOWN_ARTIST = "Unknown Artist"
