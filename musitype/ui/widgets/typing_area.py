from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QFont, QColor, QPaintEvent, QFontMetricsF
from PySide6.QtCore import Qt, QTimer, QRectF, QPointF

from musitype.services.typing_engine import SlotStatus


def _pick(theme, attr, default):
    return getattr(theme, attr, default)


class TypingArea(QWidget):
    """
    Renders the character slots of a session, one color per slot status.

    Layout is done per word so a word never breaks across lines; the result
    is an explicit index -> (position, line) mapping that scrolling queries
    by character index. Vertical offset is animated toward the target line.
    get_engine() must provide .slots (sequence of CharacterSlot).
    """

    def __init__(self, get_engine_fn, get_theme_fn, parent=None):
        super().__init__(parent)
        self.get_engine = get_engine_fn
        self.get_theme = get_theme_fn
        self.setFocusPolicy(Qt.NoFocus)

        self._font = QFont("JetBrains Mono, Consolas, Menlo, monospace", 24)
        self._line_wrap_px = 1000
        self._line_height = 44.0
        self._pad_x = 32
        self._pad_y = 32

        # index -> top-left of the glyph / line number
        self._char_pos: list[QPointF] = []
        self._char_line: list[int] = []
        self._line_count = 0

        self._offset_y = 0.0
        self._target_offset_y = 0.0
        self._last_key = None

        self._anim_timer = QTimer(self)
        self._anim_timer.setInterval(16)
        self._anim_timer.timeout.connect(self._anim_tick)
        self._anim_timer.start()

    # ---------- index mapping ----------
    def line_of(self, index: int) -> int:
        if not self._char_line:
            return 0
        index = max(0, min(index, len(self._char_line) - 1))
        return self._char_line[index]

    def position_of(self, index: int) -> QPointF:
        if not self._char_pos:
            return QPointF(0, 0)
        index = max(0, min(index, len(self._char_pos) - 1))
        return self._char_pos[index]

    def scroll_to_index(self, index: int):
        """Center the line holding index."""
        self._reflow()
        if not self._char_line:
            self._target_offset_y = 0.0
            return
        panel_top = self._pad_y
        line_top = panel_top + self.line_of(index) * self._line_height
        self._target_offset_y = self.height() / 2.0 - (line_top + self._line_height / 2.0)

    def reset_scroll(self):
        self._last_key = None
        self._offset_y = 0.0
        self._target_offset_y = 0.0
        self._reflow()
        self.update()

    # ---------- layout ----------
    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._last_key = None
        self._reflow()

    @staticmethod
    def _words(text: str):
        """Yield (start, end) spans: each word keeps its trailing spaces; newlines stand alone."""
        i, n = 0, len(text)
        while i < n:
            if text[i] == "\n":
                yield i, i + 1
                i += 1
                continue
            start = i
            while i < n and not text[i].isspace():
                i += 1
            while i < n and text[i] == " ":
                i += 1
            if i == start:
                i += 1  # tabs and other lone whitespace
            yield start, i

    def _reflow(self):
        engine = self.get_engine()
        text = "".join(s.symbol for s in engine.slots)
        wrap_w = min(self._line_wrap_px, max(10, self.width() - 2 * self._pad_x))
        key = (text, wrap_w)
        if key == self._last_key:
            return
        self._last_key = key

        fm = QFontMetricsF(self._font)
        self._line_height = max(self._line_height, fm.height() * 1.5)
        left = (self.width() - wrap_w) / 2.0
        x, line = left, 0
        self._char_pos = [QPointF()] * len(text)
        self._char_line = [0] * len(text)

        for start, end in self._words(text):
            chunk = text[start:end]
            if chunk == "\n":
                self._char_pos[start] = QPointF(x, self._pad_y + line * self._line_height)
                self._char_line[start] = line
                x, line = left, line + 1
                continue
            width = fm.horizontalAdvance(chunk.rstrip(" ") or " ")
            if x > left and x + width > left + wrap_w:
                x, line = left, line + 1
            for i in range(start, end):
                self._char_pos[i] = QPointF(x, self._pad_y + line * self._line_height)
                self._char_line[i] = line
                x += fm.horizontalAdvance(text[i])
        self._line_count = line + 1 if text else 0

    # ---------- animation ----------
    def _anim_tick(self):
        if abs(self._offset_y - self._target_offset_y) < 0.25:
            if self._offset_y == self._target_offset_y:
                return
            self._offset_y = self._target_offset_y
        else:
            self._offset_y += (self._target_offset_y - self._offset_y) * 0.22
        self.update()

    # ---------- painting ----------
    def paintEvent(self, e: QPaintEvent):
        engine = self.get_engine()
        theme = self.get_theme()
        colors = {
            SlotStatus.PENDING: QColor(_pick(theme, "pending", "#4b5563")),
            SlotStatus.ACTIVE: QColor(_pick(theme, "active", "#d1d5db")),
            SlotStatus.CORRECT: QColor(_pick(theme, "correct", "#22c55e")),
            SlotStatus.INCORRECT: QColor(_pick(theme, "error", "#ef4444")),
        }
        highlight = QColor(_pick(theme, "accent", "#eab308"))
        highlight.setAlphaF(0.18)

        self._reflow()
        p = QPainter(self)
        p.setRenderHint(QPainter.Antialiasing)
        p.fillRect(self.rect(), QColor(_pick(theme, "background", "#0f1115")))
        p.setFont(self._font)
        fm = QFontMetricsF(self._font)
        baseline_pad = (self._line_height - fm.height()) / 2.0 + fm.ascent()

        for i, slot in enumerate(engine.slots):
            if i >= len(self._char_pos):
                break
            pos = self._char_pos[i]
            y_top = pos.y() + self._offset_y
            if y_top + self._line_height < 0 or y_top > self.height():
                continue
            glyph = " " if slot.symbol == "\n" else slot.symbol
            if slot.status is SlotStatus.ACTIVE:
                w = max(fm.horizontalAdvance(glyph), fm.horizontalAdvance(" "))
                p.fillRect(QRectF(pos.x(), y_top + 4, w, self._line_height - 8), highlight)
            p.setPen(colors[slot.status])
            p.drawText(QPointF(pos.x(), y_top + baseline_pad), glyph)
        p.end()
