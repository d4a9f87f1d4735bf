from PySide6.QtCore import QObject, QTimer
from mt.core.ticker import DEFAULT_INTERVAL_MS, Scheduler, Ticker


# A Ticker backed by its own repeating QTimer, so ticks are delivered on the Qt event loop.
class QtTicker(Ticker):

    def __init__(self, callback, interval_ms=DEFAULT_INTERVAL_MS, parent=None):
        super().__init__(callback, interval_ms)
        self._timer = QTimer(parent)
        self._timer.setInterval(self.interval_ms)
        self._timer.timeout.connect(self.fire)
        self._timer.start()

    @property
    def timer(self):
        return self._timer

    def cancel(self):
        if not self._active:
            return
        super().cancel()
        self._timer.stop()
        self._timer.deleteLater()


# Scheduler that hands out QtTickers. Timers are parented to the given QObject (usually the main window) so Qt
# cleans up anything still alive when the window goes away.
class QtScheduler(Scheduler):

    def __init__(self, parent: QObject | None = None):
        self.parent = parent

    def schedule(self, callback, interval_ms=DEFAULT_INTERVAL_MS):
        return QtTicker(callback, interval_ms, parent=self.parent)
