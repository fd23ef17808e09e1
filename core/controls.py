# core/controls.py
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from .applescript import BridgeError, ScriptBridge
from .config import TARGET_BUNDLE_ID
from .debug import debug_log
from .models import ScriptCommand
from .process import open_application


class TransportControls:
    """
    Play/pause, next, previous and open-player, issued straight from the UI.

    Commands go through their own single worker so a slow poll (or artwork
    download) never holds them up, and a slow command never blocks the UI.
    """

    def __init__(
        self,
        bridge: Optional[ScriptBridge] = None,
        launcher: Callable[[str], bool] = open_application,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.bridge = bridge or ScriptBridge()
        self._launcher = launcher
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="transport")

    def play_pause(self) -> Future:
        return self._submit(ScriptCommand.PLAY_PAUSE)

    def next_track(self) -> Future:
        return self._submit(ScriptCommand.NEXT)

    def previous_track(self) -> Future:
        return self._submit(ScriptCommand.PREVIOUS)

    def open_player(self) -> Future:
        return self._executor.submit(self._open_player)

    def shutdown(self):
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _submit(self, command: ScriptCommand) -> Future:
        return self._executor.submit(self._run, command)

    def _run(self, command: ScriptCommand) -> bool:
        try:
            self.bridge.execute(command)
            return True
        except BridgeError as e:
            debug_log(f"{command.name} failed: {e}")
            return False

    def _open_player(self) -> bool:
        if self._launcher(TARGET_BUNDLE_ID):
            return True
        debug_log("Launch by bundle id failed, falling back to activate")
        return self._run(ScriptCommand.ACTIVATE)
