from PySide6.QtCore import QObject, QTimer, Signal

from musitype.services.autoplay import AutoPlaySimulator


class AutoPlayTimer(QObject):
    """Owns the scheduled-tick handle for auto-play; cancel() stops it synchronously."""

    stepped = Signal(object)   # StepResult
    started = Signal()
    stopped = Signal()

    def __init__(self, simulator: AutoPlaySimulator, parent=None):
        super().__init__(parent)
        self.simulator = simulator
        self._tick = QTimer(self)
        self._tick.setInterval(simulator.interval_ms)
        self._tick.timeout.connect(self._on_tick)

    def is_active(self) -> bool:
        return self._tick.isActive()

    def start(self) -> bool:
        if not self.simulator.enable():
            return False
        self._tick.setInterval(self.simulator.interval_ms)
        self._tick.start()
        self.started.emit()
        return True

    def cancel(self):
        was_active = self._tick.isActive() or self.simulator.enabled
        self._tick.stop()
        self.simulator.disable()
        if was_active:
            self.stopped.emit()

    def _on_tick(self):
        result = self.simulator.tick()
        done = not self.simulator.enabled
        if done:
            # stop before emitting; a slot may spin a nested event loop
            self._tick.stop()
        if result is not None:
            self.stepped.emit(result)
        if done:
            self.stopped.emit()
