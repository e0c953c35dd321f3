from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from musitype.app.errors import TextSourceError
from musitype.utils.file_handler import load_text_file


class TextLoadWorkerSignals(QObject):
    loaded = Signal(str)
    failed = Signal(str)


class TextLoadWorker(QRunnable):
    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self.signals = TextLoadWorkerSignals()

    def run(self):
        try:
            data = load_text_file(self.path)
        except TextSourceError as e:
            self.signals.failed.emit(str(e))
            return
        self.signals.loaded.emit(data)


class Workers:
    pool = QThreadPool.globalInstance()
