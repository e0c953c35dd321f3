from __future__ import annotations
from collections import deque
import logging

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QHBoxLayout, QSizePolicy

from musitype.app.calculation import Metrics
from musitype.app.settings import Settings
from musitype.app.themes import THEMES, DEFAULT_THEME_INDEX
from musitype.app.validation import classify_event, needs_suppression
from musitype.core.chrono import AutoPlayTimer
from musitype.services.autoplay import AutoPlaySimulator
from musitype.services.typing_engine import StepResult, TypingEngine
from musitype.ui.session_summary import SessionSummary
from musitype.ui.widgets.typing_area import TypingArea

log = logging.getLogger(__name__)


def _get(theme, name, default):
    return getattr(theme, name, default)


class TypingPanel(QWidget):
    finished = Signal(int, int, float)   # wpm, accuracy, seconds
    sessionReset = Signal()
    scrollRequested = Signal(int)
    autoplayChanged = Signal(bool)

    def __init__(self, settings: Settings | None = None, parent=None):
        super().__init__(parent)
        self.setFocusPolicy(Qt.StrongFocus)
        self.settings = settings or Settings()
        self.show_summary = True
        self.video_title = ""

        self.engine = TypingEngine(
            normalizer=self.settings.normalizer(),
            terminals=self.settings.terminal_symbols,
            floor_minutes=self.settings.wpm_floor_minutes,
        )
        self.simulator = AutoPlaySimulator(self.engine, self.settings.autoplay_chars_per_second)
        self.autoplay = AutoPlayTimer(self.simulator, self)
        self.autoplay.stepped.connect(self._on_step)
        self.autoplay.started.connect(lambda: self.autoplayChanged.emit(True))
        self.autoplay.stopped.connect(lambda: self.autoplayChanged.emit(False))

        self._theme = THEMES[DEFAULT_THEME_INDEX]
        self._wpm_time = deque(maxlen=3600)
        self._wpm_vals = deque(maxlen=3600)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 20, 0, 20)
        root.setSpacing(20)

        stats = QHBoxLayout()
        stats.setSpacing(40)
        self.lblWPM = QLabel("0", self)
        self.lblWPM.setObjectName("lblWPM")
        self.lblAcc = QLabel("100%", self)
        self.lblAcc.setObjectName("lblAcc")
        for lab in (self.lblWPM, self.lblAcc):
            lab.setAlignment(Qt.AlignCenter)
            stats.addWidget(lab)
        root.addLayout(stats)

        self.area = TypingArea(lambda: self.engine, lambda: self._theme, self)
        self.area.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.area.setMinimumHeight(220)
        root.addWidget(self.area, stretch=1)

        self.lblHint = QLabel("Play the music to start typing", self)
        self.lblHint.setObjectName("lblHint")
        self.lblHint.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblHint)

        self.lblTitle = QLabel("", self)
        self.lblTitle.setObjectName("lblTitle")
        self.lblTitle.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblTitle)

    # ---------- session ----------
    def start_session(self, text: str):
        """(Re)build the session from text and grab keyboard focus."""
        self.autoplay.cancel()
        self.engine.initialize(text)
        self._wpm_time.clear()
        self._wpm_vals.clear()
        self.area.reset_scroll()
        self._show_metrics(self.engine.metrics())
        self._update_hint()
        self.setFocus()
        self.sessionReset.emit()

    def restart(self):
        self.start_session(self.engine.text)

    def set_video_title(self, title: str):
        self.video_title = title or ""
        self.lblTitle.setText(f"Now playing: {self.video_title}" if self.video_title else "")

    @Slot(bool)
    def set_playing(self, playing: bool):
        self.engine.set_playing(playing)
        if not playing:
            self.autoplay.cancel()
        else:
            self.setFocus()
        self._update_hint()

    @Slot(bool)
    def set_autoplay(self, enabled: bool) -> bool:
        if not enabled:
            self.autoplay.cancel()
            return False
        return self.autoplay.start()

    def set_theme(self, theme):
        self._theme = theme
        self.setStyleSheet(
            f"""
            QLabel#lblWPM {{ color: {_get(theme, 'accent', '#8b5cf6')}; font-size: 32px; }}
            QLabel#lblAcc {{ color: {_get(theme, 'accent', '#8b5cf6')}; font-size: 32px; }}
            QLabel#lblHint, QLabel#lblTitle {{ color: {_get(theme, 'secondary', '#6b7280')}; }}
            """
        )
        self.area.update()

    # ---------- input ----------
    def keyPressEvent(self, ev):
        action = classify_event(ev)
        if not needs_suppression(action):
            return super().keyPressEvent(ev)
        ev.accept()
        if self.autoplay.is_active():
            return
        result = self.engine.handle(action)
        if result is not None:
            self._on_step(result)

    @Slot(object)
    def _on_step(self, result: StepResult):
        self._show_metrics(result.metrics)
        secs = self.engine.elapsed_seconds() or 0.0
        self._wpm_time.append(secs)
        self._wpm_vals.append(result.metrics.words_per_minute)
        if result.scroll_index is not None:
            self.area.scroll_to_index(self.engine.cursor)
            self.scrollRequested.emit(result.scroll_index)
        self.area.update()
        if result.finished:
            self._finish()

    def _finish(self):
        m = self.engine.metrics()
        secs = self.engine.elapsed_seconds() or 0.0
        log.info("Session finished: %d WPM, %d%% accuracy, %.1fs",
                 m.words_per_minute, m.accuracy_percent, secs)
        self._update_hint()
        self.finished.emit(m.words_per_minute, m.accuracy_percent, secs)
        if self.show_summary:
            SessionSummary(
                wpm=m.words_per_minute,
                acc=m.accuracy_percent,
                secs=secs,
                times=list(self._wpm_time),
                wpms=list(self._wpm_vals),
                title=self.video_title,
                parent=self,
            ).exec()

    # ---------- labels ----------
    def _show_metrics(self, m: Metrics):
        self.lblWPM.setText(f"{m.words_per_minute} WPM")
        self.lblAcc.setText(f"{m.accuracy_percent}%")

    def _update_hint(self):
        if self.engine.length == 0:
            self.lblHint.setText("Choose lyrics or enter custom text")
        elif self.engine.finished:
            self.lblHint.setText("Done! Press Restart to go again")
        elif not self.engine.playing:
            self.lblHint.setText("Play the music to start typing")
        else:
            self.lblHint.setText("")
