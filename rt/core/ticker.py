class Ticker:
    """Recurring per-station wake-ups.

    ``arm(key, callback)`` starts calling ``callback()`` every interval until
    ``cancel(key)``.  Arming a key that is already armed replaces the old
    schedule.  A callback must finish before the next wake-up for that key is
    scheduled, so ticks for one station never overlap.

    The base class schedules nothing; the Qt event loop implementation lives in
    ``rt.ui.ticker``.
    """

    def arm(self, key, callback):
        pass

    def cancel(self, key):
        pass

    def is_armed(self, key):
        return False

    def cancel_all(self):
        pass
