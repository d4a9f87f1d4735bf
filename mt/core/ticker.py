"""Periodic scheduling contract used to drive running time units.

A ``Scheduler`` hands out ``Ticker`` registrations. Each registration calls its
callback once per interval until it is cancelled. Units never talk to a concrete
timer directly, so the same state machine runs on the Qt event loop
(``mt.ui.qt_ticker.QtScheduler``) or on a ``ManualScheduler`` that is advanced by
hand, which is what the tests and any headless use rely on.
"""

from collections.abc import Callable
from mt.common.logger import log

DEFAULT_INTERVAL_MS = 1000


# One live periodic registration. Cancelling is idempotent, and once cancelled the callback never fires again.
class Ticker:

    def __init__(self, callback: Callable[[], None], interval_ms: int = DEFAULT_INTERVAL_MS):
        self.callback = callback
        self.interval_ms = int(interval_ms)
        self._active = True

    @property
    def active(self):
        return self._active

    def cancel(self):
        self._active = False

    # Delivers one tick to the callback, unless cancelled.
    def fire(self):
        if self._active:
            self.callback()


# Base scheduler. Subclasses decide how (and on what loop) tickers actually get fired.
class Scheduler:

    def schedule(self, callback: Callable[[], None], interval_ms: int = DEFAULT_INTERVAL_MS) -> Ticker:
        raise NotImplementedError


# Deterministic scheduler: nothing happens until advance() is called, then every active ticker fires once per step
# in the order it was scheduled.
class ManualScheduler(Scheduler):

    def __init__(self):
        self._tickers = []

    def schedule(self, callback, interval_ms=DEFAULT_INTERVAL_MS):
        ticker = Ticker(callback, interval_ms)
        self._tickers.append(ticker)
        return ticker

    def active_tickers(self):
        self._tickers = [t for t in self._tickers if t.active]
        return list(self._tickers)

    def advance(self, ticks=1):
        for _ in range(int(ticks)):
            # Snapshot first, so tickers created during this step wait for the next one. Tickers cancelled during
            # this step (e.g. by another unit's callback) are skipped by fire().
            for ticker in self.active_tickers():
                ticker.fire()
        log.debug(f"Manual scheduler advanced {ticks} tick(s), {len(self.active_tickers())} ticker(s) still active")
