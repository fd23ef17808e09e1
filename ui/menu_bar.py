# ui/menu_bar.py
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QCursor, QFont, QFontMetrics, QGuiApplication, QIcon, QPainter, QPainterPath, QPixmap
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QFrame, QMenu, QSystemTrayIcon
)

from core.config import APP_NAME, TARGET_APP_NAME
from core.controls import TransportControls
from core.formatter import (
    artist_text, compact_label, detail_text, full_label,
    should_use_icon_only, state_text, title_text,
)
from core.models import PlaybackState
from core.reconciler import Reconciler
from .worker import PollWorker

PANEL_BG = "#181818"
ACCENT = "#1db954"
ART_SIZE = 72
ICON_HEIGHT = 32
NOTE_GLYPH = "♫"


def menu_bar_text(state: PlaybackState) -> Optional[str]:
    """Text for the status item, or None when a long label collapses to the icon."""
    if should_use_icon_only(state):
        return None
    return compact_label(state)


class MenuBarPanel(QWidget):
    """Tray icon plus the popover panel it opens. Renders whatever the worker publishes."""

    def __init__(self, reconciler: Reconciler, controls: TransportControls):
        super().__init__(None, Qt.Tool | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)

        self.setWindowTitle(APP_NAME)
        self.setFixedWidth(420)

        self.reconciler = reconciler
        self.controls = controls
        self.worker = None
        self._tray = None
        self._tray_menu = None
        self._header_action = None
        self._artwork = None
        self.status_text = None

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._build_panel())

        self._apply_styles()
        self._init_tray()
        self._render(reconciler.store.current)

    # ==================================================
    # PANEL
    # ==================================================

    def _build_panel(self):
        card = QFrame()
        card.setObjectName("Panel")
        v = QVBoxLayout(card)
        v.setContentsMargins(12, 12, 12, 12)
        v.setSpacing(12)

        top = QHBoxLayout()
        top.setSpacing(12)

        self.p_art = QLabel("♪")
        self.p_art.setObjectName("Art")
        self.p_art.setFixedSize(ART_SIZE, ART_SIZE)
        self.p_art.setAlignment(Qt.AlignCenter)

        text_col = QVBoxLayout()
        text_col.setSpacing(4)

        self.p_title = QLabel("")
        self.p_title.setObjectName("SongTitle")

        self.p_artist = QLabel("—")
        self.p_artist.setObjectName("ArtistName")

        self.p_state = QLabel("—")
        self.p_state.setObjectName("StatePill")

        text_col.addWidget(self.p_title)
        text_col.addWidget(self.p_artist)
        text_col.addWidget(self.p_state, 0, Qt.AlignLeft)
        text_col.addStretch()

        top.addWidget(self.p_art)
        top.addLayout(text_col, 1)

        self.p_detail = QLabel("")
        self.p_detail.setObjectName("Detail")
        self.p_detail.setWordWrap(True)

        controls = QFrame()
        controls.setObjectName("Controls")
        ch = QHBoxLayout(controls)
        ch.setContentsMargins(0, 6, 0, 6)
        ch.setSpacing(20)
        ch.addStretch()
        ch.addWidget(self._transport_button("⏮", self.controls.previous_track))
        ch.addWidget(self._transport_button("⏯", self.controls.play_pause))
        ch.addWidget(self._transport_button("⏭", self.controls.next_track))
        ch.addStretch()

        divider = QFrame()
        divider.setObjectName("Divider")
        divider.setFixedHeight(1)

        footer = QHBoxLayout()
        footer.setSpacing(16)

        open_btn = QPushButton(f"Open {TARGET_APP_NAME}")
        open_btn.setObjectName("Footer")
        open_btn.clicked.connect(self._on_open_clicked)

        quit_btn = QPushButton(f"Quit {APP_NAME}")
        quit_btn.setObjectName("Footer")
        quit_btn.clicked.connect(self._quit)

        footer.addWidget(open_btn)
        footer.addWidget(quit_btn)
        footer.addStretch()

        v.addLayout(top)
        v.addWidget(self.p_detail)
        v.addWidget(controls)
        v.addWidget(divider)
        v.addLayout(footer)
        return card

    def _transport_button(self, glyph: str, action):
        btn = QPushButton(glyph)
        btn.setObjectName("Transport")
        btn.setFixedSize(36, 36)
        btn.clicked.connect(lambda: action())
        return btn

    # ==================================================
    # WORKER HOOKUP
    # ==================================================

    def start(self):
        if self.worker:
            return
        self.worker = PollWorker(self.reconciler, parent=self)
        self.worker.state_changed.connect(self._render)
        self.worker.start()

    def _render(self, state: PlaybackState):
        label = full_label(state)

        self.p_title.setText(title_text(state))
        self.p_artist.setText(artist_text(state))
        self.p_state.setText(state_text(state))
        self.p_detail.setText("" if state.is_active else detail_text(state))
        self._set_artwork(state.artwork)

        self.status_text = menu_bar_text(state)
        if self._tray:
            # Long titles collapse to the icon; the tooltip always has the full text.
            self._tray.setToolTip(label)
            if self.status_text:
                self._tray.setIcon(self._label_icon(self.status_text))
            else:
                self._tray.setIcon(self._note_icon())
            if self._header_action:
                self._header_action.setText(self.status_text or NOTE_GLYPH)

    def _set_artwork(self, data: Optional[bytes]):
        if data == self._artwork:
            return
        self._artwork = data

        if data:
            pix = QPixmap()
            if pix.loadFromData(data):
                scaled = pix.scaled(
                    self.p_art.size(),
                    Qt.KeepAspectRatioByExpanding,
                    Qt.SmoothTransformation,
                )
                self.p_art.setPixmap(self._rounded_pixmap(scaled, radius=10))
                self.p_art.setText("")
                return

        self.p_art.setPixmap(QPixmap())
        self.p_art.setText("♪")

    def _rounded_pixmap(self, pixmap: QPixmap, radius: int) -> QPixmap:
        size = self.p_art.size()
        rounded = QPixmap(size)
        rounded.fill(Qt.transparent)

        painter = QPainter(rounded)
        painter.setRenderHints(QPainter.Antialiasing | QPainter.SmoothPixmapTransform)

        path = QPainterPath()
        path.addRoundedRect(0, 0, size.width(), size.height(), radius, radius)
        painter.setClipPath(path)
        painter.drawPixmap(0, 0, pixmap)
        painter.end()

        return rounded

    def _on_open_clicked(self):
        self.controls.open_player()
        self.hide()

    # ==================================================
    # TRAY
    # ==================================================

    def _init_tray(self):
        if not QSystemTrayIcon.isSystemTrayAvailable():
            return

        tray = QSystemTrayIcon(self)
        tray.setIcon(self._note_icon())
        tray.setToolTip(APP_NAME)

        menu = QMenu()
        self._header_action = menu.addAction(APP_NAME)
        self._header_action.setEnabled(False)
        menu.addSeparator()
        menu.addAction("Play/Pause").triggered.connect(lambda: self.controls.play_pause())
        menu.addAction("Next").triggered.connect(lambda: self.controls.next_track())
        menu.addAction("Previous").triggered.connect(lambda: self.controls.previous_track())
        menu.addSeparator()
        menu.addAction(f"Open {TARGET_APP_NAME}").triggered.connect(self._on_open_clicked)
        menu.addAction(f"Quit {APP_NAME}").triggered.connect(self._quit)

        tray.activated.connect(self._on_tray_activated)
        tray.setContextMenu(menu)
        tray.show()
        self._tray = tray
        self._tray_menu = menu

    def _note_icon(self) -> QIcon:
        return self._label_icon(NOTE_GLYPH, pixel_size=26)

    def _label_icon(self, text: str, pixel_size: int = 18) -> QIcon:
        font = QFont()
        font.setPixelSize(pixel_size)
        width = max(ICON_HEIGHT, QFontMetrics(font).horizontalAdvance(text) + 8)

        pix = QPixmap(width, ICON_HEIGHT)
        pix.fill(Qt.transparent)
        painter = QPainter(pix)
        painter.setRenderHints(QPainter.Antialiasing | QPainter.TextAntialiasing)
        painter.setPen(QColor("black"))
        painter.setFont(font)
        painter.drawText(pix.rect(), Qt.AlignCenter, text)
        painter.end()
        icon = QIcon(pix)
        icon.setIsMask(True)
        return icon

    def _on_tray_activated(self, reason):
        if reason == QSystemTrayIcon.Trigger:
            self._toggle_panel()

    def _toggle_panel(self):
        if self.isVisible():
            self.hide()
            return

        self.adjustSize()
        pos = QCursor.pos()
        screen = QGuiApplication.screenAt(pos)
        if screen:
            area = screen.availableGeometry()
            x = min(max(area.left(), pos.x() - self.width() // 2), area.right() - self.width())
            y = area.top()
            self.move(x, y)
        self.show()
        self.raise_()
        self.activateWindow()

    # ==================================================
    # CLEAN SHUTDOWN
    # ==================================================

    def _quit(self):
        self.stop()
        app = QGuiApplication.instance()
        if app:
            app.quit()
        else:
            self.close()

    def stop(self):
        if self.worker:
            self.worker.stop()
            if self.worker.isRunning():
                # Bounded by the script and artwork timeouts of the cycle in flight.
                self.worker.wait()
            self.worker = None
        self.controls.shutdown()
        if self._tray:
            self._tray.hide()

    # ==================================================
    # STYLES
    # ==================================================

    def _apply_styles(self):
        self.setStyleSheet(f"""
            QWidget {{
                color: white;
                font-family: -apple-system, BlinkMacSystemFont,
                             "Segoe UI", Inter, Arial;
            }}

            QFrame#Panel {{
                background-color: {PANEL_BG};
                border-radius: 14px;
            }}

            QLabel {{
                background: transparent;
                qproperty-textInteractionFlags: NoTextInteraction;
            }}

            QLabel#Art {{
                background-color: rgba(255,255,255,0.10);
                border-radius: 10px;
                color: rgba(255,255,255,0.85);
                font-size: 24px;
                font-weight: 800;
            }}

            QLabel#SongTitle {{
                font-size: 15px;
                font-weight: 700;
            }}

            QLabel#ArtistName {{
                font-size: 13px;
                color: rgba(255,255,255,0.70);
            }}

            QLabel#StatePill {{
                font-size: 11px;
                padding: 4px 8px;
                background-color: rgba(255,255,255,0.12);
                border-radius: 10px;
            }}

            QLabel#Detail {{
                font-size: 12px;
                color: rgba(255,255,255,0.75);
            }}

            QFrame#Controls {{
                background-color: rgba(255,255,255,0.06);
                border-radius: 12px;
            }}

            QPushButton#Transport {{
                background: transparent;
                border: 0px;
                font-size: 20px;
            }}

            QPushButton#Transport:hover {{
                color: {ACCENT};
            }}

            QFrame#Divider {{
                background-color: rgba(255,255,255,0.15);
            }}

            QPushButton#Footer {{
                background-color: rgba(255,255,255,0.08);
                border: 1px solid rgba(255,255,255,0.18);
                border-radius: 6px;
                padding: 5px 10px;
                font-size: 12px;
            }}

            QPushButton#Footer:hover {{
                background-color: rgba(255,255,255,0.16);
            }}
        """)
