import sys

from PySide6.QtWidgets import QApplication

from core.applescript import ScriptBridge
from core.controls import TransportControls
from core.reconciler import Reconciler
from core.store import PlaybackStore
from ui.menu_bar import MenuBarPanel


def main():
    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    bridge = ScriptBridge()
    reconciler = Reconciler(bridge=bridge, store=PlaybackStore())
    controls = TransportControls(bridge=bridge)

    panel = MenuBarPanel(reconciler, controls)
    panel.start()
    app.aboutToQuit.connect(panel.stop)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
