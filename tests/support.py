"""Shared fakes for the test suite: a controllable clock, a manual ticker, and recording sinks."""

from datetime import datetime, timedelta, timezone

from rt.core.alerts import AlertSink
from rt.core.errors import AlertDispatchFailure, PersistenceWriteFailure
from rt.core.ticker import Ticker

T0 = datetime(2026, 3, 14, 18, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


class ManualTicker(Ticker):
    """Keeps armed callbacks so tests decide when a tick happens."""

    def __init__(self):
        self.armed = {}
        self.cancelled = []

    def arm(self, key, callback):
        self.armed[key] = callback

    def cancel(self, key):
        if self.armed.pop(key, None) is not None:
            self.cancelled.append(key)

    def is_armed(self, key):
        return key in self.armed

    def cancel_all(self):
        for key in list(self.armed):
            self.cancel(key)

    def fire(self, key):
        callback = self.armed.get(key)
        if callback is not None:
            callback()


class RecordingAlerts(AlertSink):
    def __init__(self):
        self.cues = []
        self.expired = []

    def cue(self, kind):
        self.cues.append(kind)

    def notify_expired(self, station_name):
        self.expired.append(station_name)


class FailingAlerts(AlertSink):
    def cue(self, kind):
        raise AlertDispatchFailure("no audio device")

    def notify_expired(self, station_name):
        raise AlertDispatchFailure("notifications denied")


class FailingWrites:
    """Wraps a store so every write fails, like a full disk."""

    def __init__(self, store):
        self._store = store
        self.attempts = 0

    def read(self, key, default=None):
        return self._store.read(key, default)

    def write(self, key, value):
        self.attempts += 1
        raise PersistenceWriteFailure(key, OSError(28, "No space left on device"))
