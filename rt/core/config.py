from rt.common.logger import log
from rt.core.store import write_quietly

SETTINGS_KEY = "settings"

# Default values for the settings document.
_SETTINGS_DEFAULTS = {
    "currency": "EGP",
    "default_rate": "50",
    "default_fixed_minutes": "60",
    "tick_interval_ms": 1000,
    "sounds_enabled": True,
    "notifications_enabled": True,
    "confirm_delete": True,
    "confirm_reset": True,
    "always_on_top": False,
}

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return dict(_SETTINGS_DEFAULTS)

# Loads settings from the store, filling in any missing or wrongly-typed values from the defaults. Whatever had to be
# defaulted is written back, so the settings file on disk is always complete.
def load_settings(store):
    if not store.exists(SETTINGS_KEY):
        log.info("No stored settings found, writing defaults.")
        settings = build_default_settings()
        save_settings(store, settings)
        return settings

    raw = store.read(SETTINGS_KEY)
    if not isinstance(raw, dict):
        log.warning(f"Stored settings were a {type(raw).__name__}, not a dict - falling back to defaults.")
        settings = build_default_settings()
        save_settings(store, settings)
        return settings

    settings = {}
    defaulted_values = set()
    for key, default in _SETTINGS_DEFAULTS.items():
        value = raw.get(key, default)
        # bool is a subclass of int, so check it explicitly to keep "tick_interval_ms": true out
        if type(value) is not type(default):
            defaulted_values.add(key)
            value = default
        elif key not in raw:
            defaulted_values.add(key)
        settings[key] = value

    if settings["tick_interval_ms"] <= 0:
        defaulted_values.add("tick_interval_ms")
        settings["tick_interval_ms"] = _SETTINGS_DEFAULTS["tick_interval_ms"]

    if defaulted_values:
        log.warning(f"Loaded settings, but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
        save_settings(store, settings)
    else:
        log.info("Successfully loaded settings.")
    return settings

def save_settings(store, settings):
    return write_quietly(store, SETTINGS_KEY, dict(settings))
