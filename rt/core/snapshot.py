import json
import os
from datetime import datetime
from pathlib import Path
from rt.common.logger import log
from rt.util.misc import now_iso

# Exponential-ish time-tier targets in seconds.  For each tier we keep the ledger snapshot whose
# timestamp is closest to (now - tier).
TIERS = [
    60 * 60,      # ~1 hour ago
    24 * 3600,    # ~1 day ago
    2 * 86400,    # ~2 days ago
    7 * 86400,    # ~1 week ago
    14 * 86400,   # ~2 weeks ago
    30 * 86400,   # ~1 month ago
    90 * 86400,   # ~3 months ago
]

# Writes the given ledger records as a standalone snapshot file, so a wiped ledger can still be recovered by hand.
def create_snapshot(records, snapshot_dir, reason):
    snapshot_dir = Path(snapshot_dir)
    snapshot_dir.mkdir(parents=True, exist_ok=True)
    snap = {
        "meta": {
            "saved_at": now_iso(),
            "snapshot_reason": reason,
            "record_count": len(records),
        },
        "ledger": list(records),
    }

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    target_path = snapshot_dir / f"ledger_{timestamp}.json"
    with open(target_path, "w", encoding="utf-8") as f:
        json.dump(snap, f, indent=2)
    log.info(f"Saved ledger snapshot ({len(records)} records) for reason '{reason}' to {target_path}")
    return target_path

# Extracts and returns the datetime from a given snapshot's filename, such as ledger_20260212_140311_123456.json ->
# 2/12/2026, 2:03PM, 11.123456 seconds
def _parse_snapshot_time(filename):
    base = os.path.splitext(filename)[0]
    parts = base.split("_", 1)
    if len(parts) < 2:
        return None
    try:
        return datetime.strptime(parts[1], "%Y%m%d_%H%M%S_%f")
    except ValueError:
        return None

# Use time-tier retention to remove all snapshots that don't best fit any tier. The newest snapshot is always kept.
def prune_snapshots(snapshot_dir):
    snapshot_dir = Path(snapshot_dir)
    if not snapshot_dir.is_dir():
        return 0

    entries = []
    for path in snapshot_dir.iterdir():
        if not path.name.startswith("ledger_") or not path.name.endswith(".json"):
            continue
        ts = _parse_snapshot_time(path.name)
        if ts is not None:
            entries.append((path.name, ts))

    # This means there isn't anything to prune yet.
    if len(entries) <= 1:
        return 0

    entries.sort(key=lambda e: e[1], reverse=True)
    now = datetime.now()

    keep = {entries[0][0]}
    for tier_secs in TIERS:
        target = now.timestamp() - tier_secs
        best = min(entries, key=lambda e: abs(e[1].timestamp() - target))
        keep.add(best[0])

    pruned_count = 0
    for filename, _ in entries:
        if filename not in keep:
            try:
                os.remove(snapshot_dir / filename)
                pruned_count += 1
            except OSError:
                pass
    if pruned_count > 0:
        log.info(f"Pruned {pruned_count} ledger snapshots from '{snapshot_dir}'")
    return pruned_count
