# ui/session_summary.py
from __future__ import annotations
from typing import Sequence

from PySide6.QtWidgets import QDialog, QVBoxLayout, QLabel, QPushButton
import pyqtgraph as pg

from musitype.app.calculation import smooth


class SessionSummary(QDialog):
    """Final WPM / accuracy and a WPM-over-time curve sampled at each keystroke."""

    def __init__(
        self,
        wpm: int,
        acc: int,
        secs: float,
        times: Sequence[float],
        wpms: Sequence[float],
        title: str = "",
        parent=None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Session Summary")
        self.resize(720, 420)

        root = QVBoxLayout(self)
        if title:
            root.addWidget(QLabel(title))
        root.addWidget(QLabel(f"WPM: {wpm}"))
        root.addWidget(QLabel(f"Accuracy: {acc}%"))
        root.addWidget(QLabel(f"Time: {secs:.1f}s"))

        plot = pg.PlotWidget()
        plot.setBackground(None)
        plot.setMenuEnabled(False)
        plot.setMouseEnabled(x=False, y=False)
        plot.hideButtons()
        plot.showGrid(x=False, y=True, alpha=0.08)
        plot.setLabel("left", "WPM")
        plot.setLabel("bottom", "Time (s)")

        times = [float(t) for t in times]
        wpms = smooth([float(v) for v in wpms], factor=0.3)
        self.curve = plot.plot(times, wpms, pen=pg.mkPen(color=(167, 139, 250), width=2))
        root.addWidget(plot, stretch=1)

        btn = QPushButton("OK", self)
        btn.clicked.connect(self.accept)
        root.addWidget(btn)
