"""Completed-session ledger — newest first, with a derived revenue total."""

from dataclasses import dataclass, asdict
from datetime import datetime
from uuid import uuid4
from rt.common.logger import log
from rt.core.snapshot import create_snapshot, prune_snapshots
from rt.core.store import write_quietly

LEDGER_KEY = "ledger"


@dataclass(frozen=True)
class SessionRecord:
    id: str
    station_id: int
    station_name: str
    start_time: datetime
    end_time: datetime
    duration_seconds: int
    hourly_rate: float
    total_cost: float
    customer_name: str = ""
    mode: str = "OPEN"

    @classmethod
    def create(cls, station_id, station_name, start_time, end_time, duration_seconds, hourly_rate,
               customer_name="", mode="OPEN"):
        """Build a record, deriving its id and cost."""
        return cls(
            id=uuid4().hex,
            station_id=station_id,
            station_name=station_name,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=duration_seconds,
            hourly_rate=hourly_rate,
            total_cost=(duration_seconds / 3600) * hourly_rate,
            customer_name=customer_name,
            mode=mode,
        )

    def to_dict(self):
        d = asdict(self)
        d["start_time"] = self.start_time.isoformat()
        d["end_time"] = self.end_time.isoformat()
        return d

    @classmethod
    def from_dict(cls, d):
        """Inverse of ``to_dict``.  Raises KeyError/TypeError/ValueError/OverflowError on bad input."""
        return cls(
            id=str(d["id"]),
            station_id=int(d["station_id"]),
            station_name=str(d["station_name"]),
            start_time=datetime.fromisoformat(d["start_time"]),
            end_time=datetime.fromisoformat(d["end_time"]),
            duration_seconds=int(d["duration_seconds"]),
            hourly_rate=float(d["hourly_rate"]),
            total_cost=float(d["total_cost"]),
            customer_name=str(d.get("customer_name", "")),
            mode=str(d.get("mode", "OPEN")),
        )


class Ledger:

    def __init__(self, store, snapshot_dir=None):
        self._store = store
        self._snapshot_dir = snapshot_dir
        self._records = self._load()

    def _load(self):
        raw = self._store.read(LEDGER_KEY, default=[])
        if not isinstance(raw, list):
            log.warning(f"Stored ledger was a {type(raw).__name__}, not a list - starting empty.")
            return []
        records = []
        for entry in raw:
            try:
                records.append(SessionRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError, OverflowError):
                log.warning(f"Dropping malformed ledger entry: {entry!r}")
        log.info(f"Loaded ledger with {len(records)} records.")
        return records

    def _save(self):
        write_quietly(self._store, LEDGER_KEY, [r.to_dict() for r in self._records])

    @property
    def records(self):
        return tuple(self._records)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(tuple(self._records))

    def get(self, record_id):
        return next((r for r in self._records if r.id == record_id), None)

    def append(self, record):
        self._records.insert(0, record)
        self._save()
        log.info(f"Ledger: +{record.total_cost:.2f} from station {record.station_id} "
                 f"'{record.station_name}' ({record.duration_seconds}s @ {record.hourly_rate})")

    def remove(self, record_id):
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._save()
        log.info(f"Ledger: removed record {record_id}")
        return True

    def reset_all(self):
        if self._snapshot_dir is not None and self._records:
            try:
                create_snapshot([r.to_dict() for r in self._records], self._snapshot_dir, "ledger_reset")
                prune_snapshots(self._snapshot_dir)
            except OSError:
                log.warning("Could not snapshot the ledger before reset, resetting anyway.", exc_info=True)
        count = len(self._records)
        self._records = []
        self._save()
        log.info(f"Ledger: reset, {count} records cleared")

    def total_revenue(self):
        return sum(r.total_cost for r in self._records)
