from PySide6.QtCore import QTimer
from rt.common.logger import log
from rt.core.ticker import Ticker


class QtTicker(Ticker):
    """One single-shot QTimer per station, re-armed only after its callback returns.

    Re-arming after the callback (instead of a repeating timer) keeps ticks for
    a station from ever stacking up behind a slow save or a modal alert.
    """

    def __init__(self, interval_ms=1000, parent=None):
        self._interval_ms = interval_ms
        self._parent = parent
        self._timers = {}  # key -> QTimer

    def arm(self, key, callback):
        self.cancel(key)
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(self._interval_ms)
        timer.timeout.connect(lambda: self._fire(key, timer, callback))
        self._timers[key] = timer
        timer.start()
        log.debug(f"Armed ticker for station {key} every {self._interval_ms}ms")

    def _fire(self, key, timer, callback):
        try:
            callback()
        except Exception:
            log.exception(f"Tick for station {key} raised")
        # The callback may have cancelled (or replaced) this timer, e.g. a stop triggered from a tick.
        if self._timers.get(key) is timer:
            timer.start()

    def cancel(self, key):
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()
            log.debug(f"Cancelled ticker for station {key}")

    def is_armed(self, key):
        return key in self._timers

    def cancel_all(self):
        for key in list(self._timers):
            self.cancel(key)
