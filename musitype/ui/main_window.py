from __future__ import annotations
from pathlib import Path

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QMenu, QFileDialog, QMessageBox, QInputDialog,
    QToolButton, QPushButton
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt
import logging

from musitype.app.errors import TextSourceError
from musitype.app.settings import Settings
from musitype.app.themes import THEMES, load_custom_themes, theme_index
from musitype.app.validation import validate_custom_text
from musitype.core.threads import TextLoadWorker, Workers
from musitype.ui.typing_panel import TypingPanel
from musitype.utils.file_handler import WELCOME_TEXT, sample_lyrics

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Hosts the typing panel. The Play/Pause toggle stands in for the music
    player's playing signal, Restart for its restart notification.
    """

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or Settings()
        self.setWindowTitle("Musitype")
        self.resize(1200, 720)
        load_custom_themes()
        self.theme_idx = theme_index(self.settings.theme)

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(16, 24, 16, 16)
        root_v.setSpacing(24)
        self._build_top_bar(root_v)

        self.panel = TypingPanel(self.settings, self)
        self.panel.finished.connect(self._on_finished)
        self.panel.autoplayChanged.connect(self._on_autoplay_changed)
        root_v.addWidget(self.panel, 1)
        self.setCentralWidget(root)

        # keep keyboard focus on the panel
        self.setFocusPolicy(Qt.NoFocus)
        self.menuBar().setVisible(False)
        self._apply_theme(self.theme_idx)
        self._set_text(WELCOME_TEXT)

    # ---------------- Top Bar ----------------
    def _button(self, bar, label, handler, checkable=False):
        btn = QPushButton(label, bar)
        btn.setObjectName("TopBtn")
        btn.setFocusPolicy(Qt.NoFocus)
        btn.setCheckable(checkable)
        if checkable:
            btn.toggled.connect(handler)
        else:
            btn.clicked.connect(handler)
        return btn

    def _build_top_bar(self, parent_layout):
        bar = QWidget(self)
        bar.setObjectName("TopBar")
        h = QHBoxLayout(bar)
        h.setContentsMargins(14, 12, 14, 12)
        h.setSpacing(10)

        self.theme_menu = QMenu(self)
        for i, t in enumerate(THEMES):
            act = QAction(t.name, self)
            act.triggered.connect(lambda _, idx=i: self._apply_theme(idx))
            self.theme_menu.addAction(act)
        theme_btn = QToolButton(bar)
        theme_btn.setText("Theme")
        theme_btn.setObjectName("TopBtn")
        theme_btn.setMenu(self.theme_menu)
        theme_btn.setPopupMode(QToolButton.InstantPopup)
        theme_btn.setFocusPolicy(Qt.NoFocus)
        h.addWidget(theme_btn)

        h.addWidget(self._button(bar, "Example lyrics", self._on_sample))
        h.addWidget(self._button(bar, "Custom text…", self._on_custom))
        h.addWidget(self._button(bar, "Load text…", self._on_load))
        h.addStretch(1)

        self.btnPlay = self._button(bar, "Play", self._on_play_toggled, checkable=True)
        self.btnRestart = self._button(bar, "Restart", self._on_restart)
        self.btnAuto = self._button(bar, "Auto-play", self._on_autoplay_toggled, checkable=True)
        for b in (self.btnPlay, self.btnRestart, self.btnAuto):
            h.addWidget(b)

        parent_layout.addWidget(bar)

        self._topbar_qss = """
        QWidget#TopBar {
            background: rgba(255,255,255,0.04);
            border: 1px solid rgba(255,255,255,0.08);
            border-radius: 14px;
        }
        QPushButton#TopBtn, QToolButton#TopBtn {
            background: transparent;
            border: 1px solid rgba(255,255,255,0.10);
            border-radius: 9px;
            padding: 6px 12px;
        }
        QPushButton#TopBtn:checked {
            border-color: rgba(255,255,255,0.45);
            background: rgba(255,255,255,0.10);
        }
        QToolButton::menu-indicator { image: none; width: 0px; height: 0px; }
        """

    # ---------------- Theme ----------------
    def _apply_theme(self, idx):
        theme = THEMES[idx]
        self.theme_idx = idx
        self.panel.set_theme(theme)
        self.setStyleSheet(
            f"""
            QWidget {{ background: {theme.background}; color: {theme.primary}; }}
            {self._topbar_qss}
            """
        )

    # ---------------- Playback ----------------
    def _on_play_toggled(self, checked: bool):
        self.btnPlay.setText("Pause" if checked else "Play")
        self.panel.set_playing(checked)

    def _on_restart(self):
        self.panel.restart()
        if not self.btnPlay.isChecked():
            self.btnPlay.setChecked(True)

    def _on_autoplay_toggled(self, checked: bool):
        if self.panel.set_autoplay(checked) != checked:
            self._sync_autoplay_button(False)

    def _on_autoplay_changed(self, active: bool):
        self._sync_autoplay_button(active)

    def _sync_autoplay_button(self, active: bool):
        self.btnAuto.blockSignals(True)
        self.btnAuto.setChecked(active)
        self.btnAuto.blockSignals(False)

    # ---------------- Text Sources ----------------
    def _set_text(self, text: str):
        self.panel.start_session(text)

    def _on_sample(self):
        self._set_text(sample_lyrics())

    def _on_custom(self):
        text, ok = QInputDialog.getMultiLineText(self, "Custom text", "Enter custom text for typing:")
        if not ok:
            return
        try:
            text = validate_custom_text(text, self.settings.min_custom_text_length)
        except TextSourceError as e:
            QMessageBox.warning(self, "Custom text", str(e))
            return
        self._set_text(text)

    def _on_load(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open lyrics", "", "Text (*.txt *.lrc)")
        if not path:
            return
        worker = TextLoadWorker(path)
        worker.signals.loaded.connect(lambda data, p=path: self._on_loaded_text(data, Path(p).stem))
        worker.signals.failed.connect(self._on_load_failed)
        Workers.pool.start(worker)

    def _on_loaded_text(self, data: str, title: str = ""):
        if not data:
            self._on_load_failed("The file is empty")
            return
        self.panel.set_video_title(title)
        self._set_text(data)

    def _on_load_failed(self, msg: str):
        log.warning("Text load failed: %s", msg)
        QMessageBox.warning(self, "Load text", msg)

    # ---------------- Results ----------------
    def _on_finished(self, wpm: int, acc: int, secs: float):
        self.setWindowTitle(f"Musitype — {wpm} WPM, {acc}%")
