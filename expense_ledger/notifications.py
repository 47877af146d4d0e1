import logging

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from expense_ledger.constants import KIND_SUCCESS, MESSAGE_DURATION_MS
from expense_ledger.models import Notification

logger = logging.getLogger(__name__)


class MessageChannel(QObject):
    """Shows one transient message at a time.

    Each channel owns a single timer. Showing a new message restarts it, so
    the timeout of an earlier message can never hide a later one.
    """

    shown = pyqtSignal(str, str)
    hidden = pyqtSignal()

    def __init__(self, duration_ms=MESSAGE_DURATION_MS, parent=None):
        super().__init__(parent)
        self.current = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(duration_ms)
        self._timer.timeout.connect(self.hide)

    def __call__(self, text, kind=KIND_SUCCESS):
        self.show(text, kind)

    @property
    def is_active(self):
        return self._timer.isActive()

    def show(self, text, kind=KIND_SUCCESS):
        self.current = Notification(text, kind)
        self._timer.start()
        logger.debug("Showing %s message: %s", kind, text)
        self.shown.emit(text, kind)

    def hide(self):
        self._timer.stop()
        if self.current is None:
            return
        logger.debug("Hiding message: %s", self.current.text)
        self.current = None
        self.hidden.emit()
