"""Per-station session state machine — pure logic, no UI.

An engine is either Idle or Running.  A Running engine in FIXED mode becomes
Expired once its elapsed time reaches the configured duration; that only
flags the session (and rings the alarm once), it never stops it.

Elapsed time is never stored.  It is always ``clock() - start_time``, so a
session that was running when the app closed picks up with the right elapsed
time on the next launch.
"""

from datetime import datetime
from enum import Enum
from rt.common.logger import log
from rt.core.alerts import AlertSink, dispatch_cue, dispatch_expired
from rt.core.clock import system_clock, seconds_between
from rt.core.errors import InvalidTransition, ValidationError
from rt.core.ledger import SessionRecord
from rt.core.store import write_quietly
from rt.core.ticker import Ticker
from rt.util.misc import parse_minutes, parse_rate


class SessionMode(str, Enum):
    OPEN = "OPEN"
    FIXED = "FIXED"


STATUS_STANDBY = "STANDBY"
STATUS_ACTIVE = "ACTIVE"
STATUS_EXPIRED = "TIME EXPIRED"


def state_key(station_id):
    return f"session_state_{station_id}"


class SessionEngine:

    def __init__(self, station_id, store, registry, ledger, clock=system_clock, ticker=None, alerts=None,
                 default_rate="50", default_fixed_minutes="60"):
        self.station_id = station_id
        self._store = store
        self._registry = registry
        self._ledger = ledger
        self._clock = clock
        self._ticker = ticker if ticker is not None else Ticker()
        self._alerts = alerts if alerts is not None else AlertSink()

        self.active = False
        self.start_time = None  # aware datetime, set when running
        self.hourly_rate = str(default_rate)
        self.customer_name = ""
        self.mode = SessionMode.OPEN
        self.fixed_minutes = str(default_fixed_minutes)
        self.expired = False

        # Set the first time the alarm rings in a session, only cleared by start(). Independent of `expired`.
        self._alarm_fired = False

        self._restore()

    # ------------------------------------------------------------------ #
    #  Persistence                                                         #
    # ------------------------------------------------------------------ #

    @property
    def state_key(self):
        return state_key(self.station_id)

    def snapshot(self):
        return {
            "active": self.active,
            "start_time": self.start_time.isoformat() if self.start_time is not None else None,
            "hourly_rate": self.hourly_rate,
            "customer_name": self.customer_name,
            "mode": self.mode.value,
            "fixed_minutes": self.fixed_minutes,
            "expired": self.expired,
        }

    def _save(self):
        write_quietly(self._store, self.state_key, self.snapshot())

    # Loads this station's snapshot, defaulting anything missing or malformed. A snapshot that was left active
    # resumes against the current clock.
    def _restore(self):
        raw = self._store.read(self.state_key)
        if raw is None:
            log.debug(f"No saved state for station {self.station_id}, starting idle with defaults.")
            return
        if not isinstance(raw, dict):
            log.warning(f"Saved state for station {self.station_id} was not a dict, ignoring it.")
            return

        defaulted_values = set()

        for field in ("hourly_rate", "fixed_minutes"):
            value = raw.get(field)
            if isinstance(value, str) or (isinstance(value, (int, float)) and not isinstance(value, bool)):
                setattr(self, field, str(value))
            else:
                defaulted_values.add(field)

        customer_name = raw.get("customer_name", "")
        if isinstance(customer_name, str):
            self.customer_name = customer_name
        else:
            defaulted_values.add("customer_name")

        try:
            self.mode = SessionMode(raw.get("mode", SessionMode.OPEN.value))
        except ValueError:
            defaulted_values.add("mode")

        if raw.get("active") is True:
            start_time = None
            try:
                start_time = datetime.fromisoformat(raw["start_time"])
            except (KeyError, TypeError, ValueError):
                pass
            if start_time is not None and start_time.tzinfo is None:
                start_time = start_time.astimezone()
            if start_time is None:
                defaulted_values.add("active")
                log.warning(f"Station {self.station_id} was saved as active without a usable start_time, resetting to idle.")
            else:
                self.active = True
                self.start_time = start_time

        expired = raw.get("expired") is True
        self.expired = expired and self.active and self.mode is SessionMode.FIXED
        if expired and not self.expired:
            defaulted_values.add("expired")
        # An alarm that already rang before the restart is not replayed.
        self._alarm_fired = self.expired

        if defaulted_values:
            log.warning(f"Restored station {self.station_id} with values that were defaulted: {', '.join(sorted(defaulted_values))}")
            self._save()

        if self.active:
            log.info(f"Resuming session on station {self.station_id}, running since {self.start_time.isoformat()} "
                     f"({self.elapsed_seconds}s elapsed)")
            self._ticker.arm(self.station_id, self.tick)

    # ------------------------------------------------------------------ #
    #  Derived values                                                      #
    # ------------------------------------------------------------------ #

    @property
    def name(self):
        return self._registry.name_of(self.station_id)

    @property
    def elapsed_seconds(self):
        if not self.active or self.start_time is None:
            return 0
        return seconds_between(self.start_time, self._clock())

    @property
    def limit_seconds(self):
        """Fixed-mode duration in seconds, or None when not applicable/unparseable."""
        if self.mode is not SessionMode.FIXED:
            return None
        minutes = parse_minutes(self.fixed_minutes)
        if minutes is None or minutes <= 0:
            return None
        return minutes * 60

    @property
    def remaining_seconds(self):
        limit = self.limit_seconds
        if limit is None:
            return None
        return limit - self.elapsed_seconds

    @property
    def display_seconds(self):
        """What the clock face shows: counting up in OPEN mode, down (possibly negative) in FIXED mode."""
        remaining = self.remaining_seconds
        return self.elapsed_seconds if remaining is None else remaining

    @property
    def current_cost(self):
        rate = parse_rate(self.hourly_rate) or 0.0
        return (self.elapsed_seconds / 3600) * rate

    @property
    def status(self):
        if not self.active:
            return STATUS_STANDBY
        return STATUS_EXPIRED if self.expired else STATUS_ACTIVE

    # ------------------------------------------------------------------ #
    #  Transitions                                                         #
    # ------------------------------------------------------------------ #

    def validate(self):
        """Raise ValidationError if the current inputs can't start a session."""
        if parse_rate(self.hourly_rate) is None:
            raise ValidationError("Enter a valid hourly rate.")
        if self.mode is SessionMode.FIXED:
            minutes = parse_minutes(self.fixed_minutes)
            if minutes is None or minutes <= 0:
                raise ValidationError("Enter a valid number of minutes for a fixed session.")

    def start(self):
        if self.active:
            raise InvalidTransition(f"Station {self.station_id} is already running.")
        self.validate()

        self.start_time = self._clock()
        self.active = True
        self.expired = False
        self._alarm_fired = False
        self._save()
        self._ticker.arm(self.station_id, self.tick)
        log.debug(f"Started {self.mode.value} session on station {self.station_id} at {self.start_time.isoformat()}")
        dispatch_cue(self._alerts, "start")

    def tick(self):
        """Recompute elapsed time and raise the fixed-mode alarm once.  Returns elapsed seconds."""
        if not self.active or self.start_time is None:
            return 0
        elapsed = self.elapsed_seconds
        limit = self.limit_seconds
        if limit is not None and elapsed >= limit:
            if not self.expired:
                self.expired = True
                self._save()
                log.info(f"Fixed session on station {self.station_id} expired after {elapsed}s")
            if not self._alarm_fired:
                self._alarm_fired = True
                dispatch_cue(self._alerts, "alarm")
                dispatch_expired(self._alerts, self.name)
        return elapsed

    def stop(self):
        """End the session and hand its record to the ledger.  Returns the record (None if there was no start)."""
        if not self.active:
            raise InvalidTransition(f"Station {self.station_id} is not running.")
        # Cancel first so a pending tick can never see a half-cleared session.
        self._ticker.cancel(self.station_id)

        record = None
        if self.start_time is not None:
            end_time = self._clock()
            duration = max(0, seconds_between(self.start_time, end_time))
            record = SessionRecord.create(
                station_id=self.station_id,
                station_name=self.name,
                start_time=self.start_time,
                end_time=end_time,
                duration_seconds=duration,
                hourly_rate=parse_rate(self.hourly_rate) or 0.0,
                customer_name=self.customer_name,
                mode=self.mode.value,
            )
            self._ledger.append(record)
        else:
            log.warning(f"Station {self.station_id} was active without a start_time, resetting without a record.")

        self.active = False
        self.start_time = None
        self.customer_name = ""
        self.expired = False
        self._save()
        log.debug(f"Stopped session on station {self.station_id}")
        dispatch_cue(self._alerts, "stop")
        return record

    def shutdown(self):
        """Stop ticking without touching the session.  A running session resumes on next launch."""
        self._ticker.cancel(self.station_id)

    # ------------------------------------------------------------------ #
    #  Idle-only edits                                                     #
    # ------------------------------------------------------------------ #

    def _edit(self, field, value):
        if self.active:
            log.debug(f"Rejected edit of '{field}' on running station {self.station_id}")
            return False
        setattr(self, field, value)
        self._save()
        return True

    def set_rate(self, value):
        return self._edit("hourly_rate", "" if value is None else str(value))

    def set_fixed_minutes(self, value):
        return self._edit("fixed_minutes", "" if value is None else str(value))

    def set_customer_name(self, text):
        return self._edit("customer_name", text or "")

    def set_mode(self, mode):
        try:
            mode = SessionMode(mode)
        except ValueError:
            log.debug(f"Rejected unknown mode {mode!r} on station {self.station_id}")
            return False
        return self._edit("mode", mode)

    def rename(self, name):
        return self._registry.rename(self.station_id, name)
