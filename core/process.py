# core/process.py
import subprocess

from .config import PROCESS_CHECK_TIMEOUT_SECONDS, TARGET_BUNDLE_ID
from .debug import debug_log


def is_running(bundle_id: str = TARGET_BUNDLE_ID) -> bool:
    """
    Looks the player up in the running-application registry.

    Goes through lsappinfo rather than AppleScript so the answer is still
    available when automation permission has not been granted.
    """
    try:
        result = subprocess.run(
            ["lsappinfo", "find", f"bundleid={bundle_id}"],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=PROCESS_CHECK_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        debug_log(f"Process lookup for {bundle_id} failed: {e}")
        return False

    return result.returncode == 0 and bool((result.stdout or "").strip())


def open_application(bundle_id: str = TARGET_BUNDLE_ID) -> bool:
    """Launches (or brings forward) the app. False if it could not be resolved."""
    try:
        result = subprocess.run(
            ["open", "-b", bundle_id],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=PROCESS_CHECK_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        debug_log(f"open -b {bundle_id} failed: {e}")
        return False

    if result.returncode != 0:
        debug_log(f"open -b {bundle_id} exited {result.returncode}: {(result.stderr or '').strip()}")
        return False
    return True
