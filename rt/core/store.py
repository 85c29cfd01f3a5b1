"""Key-value persistence — one JSON document per key.

Keys are the logical names the core uses (``stations``, ``ledger``,
``settings``, ``session_state_<id>``).  Writes go through a temp file and an
atomic replace so a crash mid-write never leaves a half-written document.
"""

import json
import os
import tempfile
from pathlib import Path
from rt.common.logger import log
from rt.core.errors import PersistenceWriteFailure


class JsonStore:

    def __init__(self, directory):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, key):
        return self.directory / f"{key}.json"

    def exists(self, key):
        return self.path_for(key).exists()

    def read(self, key, default=None):
        """Return the stored value for ``key``, or ``default``.

        Missing files return the default quietly; unreadable or corrupt ones
        log a warning and also return the default so the app can start fresh.
        """
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            log.warning(f"Could not read '{path}', falling back to defaults.", exc_info=True)
            return default

    def write(self, key, value):
        """Persist ``value`` under ``key``.  Raises PersistenceWriteFailure."""
        path = self.path_for(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}_", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWriteFailure(key, e) from e
        finally:
            if tmp_name is not None:
                try: os.remove(tmp_name)
                except OSError: pass
        log.debug(f"Saved '{key}' to '{path}'")


# Writes and swallows a failure with a warning. Every caller in the core wants this: a failed write only costs
# durability for the next restart, never the in-memory transition.
def write_quietly(store, key, value):
    try:
        store.write(key, value)
        return True
    except PersistenceWriteFailure:
        log.warning(f"Persisting '{key}' failed, continuing with in-memory state.", exc_info=True)
        return False
