from dataclasses import dataclass
from rt.common.logger import log
from rt.core.store import write_quietly

STATIONS_KEY = "stations"
SEED_STATION_COUNT = 3


@dataclass
class Station:
    id: int
    name: str

    def to_dict(self):
        return {"id": self.id, "name": self.name}


def default_station_name(position):
    return f"STATION {position:02d}"


class StationRegistry:
    """Ordered station identities.  Stations are added and renamed, never removed."""

    def __init__(self, store):
        self._store = store
        self._stations = self._load()
        self._next_id = max((s.id for s in self._stations), default=0) + 1

    def _load(self):
        raw = self._store.read(STATIONS_KEY)
        if raw is None:
            stations = [Station(i, default_station_name(i)) for i in range(1, SEED_STATION_COUNT + 1)]
            log.info(f"No stored stations found, seeding {len(stations)} default stations.")
            write_quietly(self._store, STATIONS_KEY, [s.to_dict() for s in stations])
            return stations
        if not isinstance(raw, list):
            log.warning(f"Stored stations were a {type(raw).__name__}, not a list - starting with none.")
            return []

        stations = []
        seen = set()
        for entry in raw:
            try:
                sid = int(entry["id"])
                name = str(entry["name"])
            except (KeyError, TypeError, ValueError, OverflowError):
                log.warning(f"Dropping malformed station entry: {entry!r}")
                continue
            if sid in seen:
                log.warning(f"Dropping duplicate station id {sid}")
                continue
            seen.add(sid)
            stations.append(Station(sid, name))
        log.info(f"Loaded {len(stations)} stations.")
        return stations

    def _save(self):
        write_quietly(self._store, STATIONS_KEY, [s.to_dict() for s in self._stations])

    def __iter__(self):
        return iter(list(self._stations))

    def __len__(self):
        return len(self._stations)

    def __contains__(self, station_id):
        return self.get(station_id) is not None

    def get(self, station_id):
        return next((s for s in self._stations if s.id == station_id), None)

    def name_of(self, station_id):
        station = self.get(station_id)
        return station.name if station is not None else ""

    def add(self):
        station = Station(self._next_id, default_station_name(len(self._stations) + 1))
        self._next_id += 1
        self._stations.append(station)
        self._save()
        log.info(f"Added station {station.id} '{station.name}'")
        return station

    def rename(self, station_id, name):
        name = (name or "").strip()
        station = self.get(station_id)
        if not name or station is None:
            return False
        station.name = name
        self._save()
        log.debug(f"Renamed station {station_id} to '{name}'")
        return True
