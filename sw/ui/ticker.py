from PySide6.QtCore import Qt, QTimer
from sw.core.ticker import Ticker, DEFAULT_INTERVAL_MS


# Ticker backed by a QTimer, so ticks run on the GUI thread between events.
class QtTicker(Ticker):

    def __init__(self, parent=None, interval_ms=DEFAULT_INTERVAL_MS):
        super().__init__(interval_ms)
        self._timer = QTimer(parent)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(interval_ms)
        self._callback = None
        self._timer.timeout.connect(self._fire)

    @property
    def active(self):
        return self._timer.isActive()

    def start(self, callback):
        self._callback = callback
        self._timer.start()

    def stop(self):
        self._timer.stop()
        self._callback = None

    def _fire(self):
        if self._callback is not None:
            self._callback()
