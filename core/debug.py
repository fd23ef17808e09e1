# core/debug.py
import os
import time
from pathlib import Path

from .config import APP_NAME


_DEBUG = os.getenv("SPOTBAR_DEBUG") == "1"

LOG_PATH = Path.home() / "Library" / "Logs" / APP_NAME / "debug.log"


def debug_log(message: str) -> None:
    """Append to the debug log and echo to stdout. No-op unless SPOTBAR_DEBUG=1."""
    if not _DEBUG:
        return

    line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {message}\n"
    try:
        LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with LOG_PATH.open("a", encoding="utf-8") as f:
            f.write(line)
    except OSError:
        pass

    print(f"[DEBUG] {message}")
