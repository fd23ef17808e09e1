# core/applescript.py
import subprocess
from typing import Optional

from .config import SCRIPT_TIMEOUT_SECONDS, TARGET_BUNDLE_ID
from .debug import debug_log
from .models import ScriptCommand


class BridgeError(Exception):
    pass


class PermissionDeniedError(BridgeError):
    """macOS refused to let us send Apple events to the player."""


class ScriptExecutionError(BridgeError):
    """Any other osascript failure: not scriptable, bad script, player quit mid-call."""


_TARGET = f'tell application id "{TARGET_BUNDLE_ID}"'

_SCRIPTS = {
    ScriptCommand.GET_PLAYER_STATE: f"{_TARGET} to player state as string",
    ScriptCommand.GET_TRACK_NAME: f"{_TARGET} to name of current track as string",
    ScriptCommand.GET_ARTIST_NAME: f"{_TARGET} to artist of current track as string",
    ScriptCommand.GET_ARTWORK_URL: f"{_TARGET} to artwork url of current track as string",
    ScriptCommand.PLAY_PAUSE: f"{_TARGET} to playpause",
    ScriptCommand.NEXT: f"{_TARGET} to next track",
    ScriptCommand.PREVIOUS: f"{_TARGET} to previous track",
    ScriptCommand.ACTIVATE: f"{_TARGET} to activate",
}

# errAEEventNotPermitted
_PERMISSION_ERROR_CODE = "-1743"
_PERMISSION_PHRASES = ("not authorized", "not authorised", "not permitted")


def render_script(command: ScriptCommand) -> str:
    return _SCRIPTS[command]


def is_permission_error(stderr: str) -> bool:
    lowered = (stderr or "").lower()
    if _PERMISSION_ERROR_CODE in lowered:
        return True
    return any(phrase in lowered for phrase in _PERMISSION_PHRASES)


class ScriptBridge:
    """
    Runs one fixed AppleScript command against the player through osascript.

    execute() returns the script's text result, or None when it produced
    nothing. Failures raise PermissionDeniedError or ScriptExecutionError;
    interpreting them is up to the caller.
    """

    def __init__(self, timeout: float = SCRIPT_TIMEOUT_SECONDS):
        self.timeout = timeout

    def execute(self, command: ScriptCommand) -> Optional[str]:
        script = render_script(command)
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            debug_log(f"AppleScript {command.name} timed out")
            raise ScriptExecutionError(f"{command.name} timed out after {self.timeout}s") from e
        except OSError as e:
            debug_log(f"osascript unavailable: {e}")
            raise ScriptExecutionError(f"osascript unavailable: {e}") from e

        if result.returncode != 0:
            err = (result.stderr or "").strip()
            debug_log(f"AppleScript {command.name} failed ({result.returncode}): {err}")
            if is_permission_error(err):
                raise PermissionDeniedError(err)
            raise ScriptExecutionError(err or f"osascript exited with {result.returncode}")

        if not command.returns_value:
            return None
        out = (result.stdout or "").strip()
        return out or None
