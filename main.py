# main.py
import time
from typing import Optional

from core.config import APP_NAME, POLL_SECONDS
from core.formatter import full_label
from core.models import PlaybackState
from core.reconciler import Reconciler


def signature(state: PlaybackState):
    return (state.kind, state.track_name, state.artist_name)


def watch(reconciler: Reconciler, poll_seconds: float = POLL_SECONDS, max_cycles: Optional[int] = None):
    last_sig = None
    cycles = 0

    while max_cycles is None or cycles < max_cycles:
        state = reconciler.poll()
        cycles += 1

        sig = signature(state)
        if sig != last_sig:
            print(f"[{APP_NAME}] {full_label(state)}")
            last_sig = sig

        if max_cycles is None or cycles < max_cycles:
            time.sleep(poll_seconds)


def main():
    print(f"[{APP_NAME}] Watching player… (Ctrl+C to stop)")
    try:
        watch(Reconciler())
    except KeyboardInterrupt:
        print(f"[{APP_NAME}] Stopped")


if __name__ == "__main__":
    main()
