"""The rental hall — every station, its engine, and the shared ledger.

This is the only object the UI talks to.  Each operation returns a plain
result (bool, record, or an error message) instead of raising, so a bad
input can never take the window down.
"""

from rt.common.logger import log
from rt.core.clock import system_clock
from rt.core.config import load_settings
from rt.core.engine import SessionEngine
from rt.core.errors import InvalidTransition, ValidationError
from rt.core.ledger import Ledger
from rt.core.stations import StationRegistry
from rt.core.ticker import Ticker


class Hall:

    def __init__(self, store, clock=system_clock, ticker=None, alerts=None, settings=None, snapshot_dir=None):
        self.store = store
        self.settings = settings if settings is not None else load_settings(store)
        self._clock = clock
        self._ticker = ticker if ticker is not None else Ticker()
        self._alerts = alerts
        self.registry = StationRegistry(store)
        self.ledger = Ledger(store, snapshot_dir=snapshot_dir)

        self._engines = {}
        for station in self.registry:
            self._engines[station.id] = self._build_engine(station.id)
        log.info(f"Hall ready: {len(self._engines)} stations, "
                 f"{sum(1 for e in self._engines.values() if e.active)} sessions resumed, "
                 f"{len(self.ledger)} ledger records")

    def _build_engine(self, station_id):
        return SessionEngine(
            station_id, self.store, self.registry, self.ledger,
            clock=self._clock,
            ticker=self._ticker,
            alerts=self._alerts,
            default_rate=self.settings["default_rate"],
            default_fixed_minutes=self.settings["default_fixed_minutes"],
        )

    # ------------------------------------------------------------------ #
    #  Stations                                                            #
    # ------------------------------------------------------------------ #

    @property
    def stations(self):
        return list(self.registry)

    def engine(self, station_id):
        return self._engines[station_id]

    def engines(self):
        return [self._engines[s.id] for s in self.registry]

    def add_station(self):
        station = self.registry.add()
        self._engines[station.id] = self._build_engine(station.id)
        return station

    def rename_station(self, station_id, name):
        return self.registry.rename(station_id, name)

    # ------------------------------------------------------------------ #
    #  Session intents                                                     #
    # ------------------------------------------------------------------ #

    def set_rate(self, station_id, value):
        return self.engine(station_id).set_rate(value)

    def set_mode(self, station_id, mode):
        return self.engine(station_id).set_mode(mode)

    def set_fixed_minutes(self, station_id, value):
        return self.engine(station_id).set_fixed_minutes(value)

    def set_customer_name(self, station_id, text):
        return self.engine(station_id).set_customer_name(text)

    def start(self, station_id):
        """Start a session.  Returns None on success, otherwise the reason it was refused."""
        try:
            self.engine(station_id).start()
        except (ValidationError, InvalidTransition) as e:
            log.info(f"Refused start on station {station_id}: {e}")
            return str(e)
        return None

    def stop(self, station_id):
        """Stop a session.  Returns the new ledger record, or None if nothing was running."""
        try:
            return self.engine(station_id).stop()
        except InvalidTransition as e:
            log.info(f"Ignored stop on station {station_id}: {e}")
            return None

    # ------------------------------------------------------------------ #
    #  Ledger                                                              #
    # ------------------------------------------------------------------ #

    def delete_record(self, record_id):
        return self.ledger.remove(record_id)

    def reset_ledger(self):
        self.ledger.reset_all()

    def total_revenue(self):
        return self.ledger.total_revenue()

    def shutdown(self):
        for engine in self._engines.values():
            engine.shutdown()
        self._ticker.cancel_all()
        log.info("Hall shut down.")
