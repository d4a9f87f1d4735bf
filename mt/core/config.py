import json
from mt.common.logger import log
from mt.common.setup import PATHS
from mt.util import now_iso


_SCHEMA_VERSION = 1

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.data / "settings.json"

# Default values for every setting. Timers themselves are never saved, only how the app looks and behaves.
_SETTINGS_DEFAULTS = {
    "theme": "Light",
    "size": "Regular",
    "font": "Calibri",
    "always_on_top": False,
    "confirm_delete": True,
    "tick_interval_ms": 1000,
    "default_countdown_seconds": 60,
}

# Extra sanity checks on top of the type check, for settings where not every value of the right type makes sense.
_SETTINGS_VALIDATORS = {
    "tick_interval_ms": lambda v: v > 0,
    "default_countdown_seconds": lambda v: v >= 0,
}

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return {
        "meta": {
            "schema_version": _SCHEMA_VERSION,
            "saved_at": now_iso(),
        },
        "settings": dict(_SETTINGS_DEFAULTS),
    }

# Returns whether the given value is acceptable for the given settings key. bool is a subclass of int, so it's
# checked separately to keep True from sneaking in as a tick interval.
def _valid_setting(key, value):
    default = _SETTINGS_DEFAULTS[key]
    if isinstance(default, bool) or isinstance(value, bool):
        if not (isinstance(default, bool) and isinstance(value, bool)):
            return False
    elif not isinstance(value, type(default)):
        return False
    validator = _SETTINGS_VALIDATORS.get(key)
    return validator is None or validator(value)

#endregion === Helpers and Paths ===

#region === Saving and Loading Settings ===

# Loads settings from SETTINGS_PATH, filling any missing or broken values with defaults.
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            log.info("No existing settings.json found, loading fresh settings dict.")
            return build_default_settings()

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object in '{SETTINGS_PATH}', got {type(data).__name__}")
        defaulted_values = set()

        # Validate the meta dict
        if "meta" not in data or not isinstance(data["meta"], dict):
            defaulted_values.add("meta")
            data["meta"] = {}
        if "schema_version" not in data["meta"] or not isinstance(data["meta"]["schema_version"], int):
            defaulted_values.add("meta.schema_version")
            data["meta"]["schema_version"] = _SCHEMA_VERSION

        # Validate the settings dict, fill in any necessary defaults
        if "settings" not in data or not isinstance(data["settings"], dict):
            defaulted_values.add("settings")
            data["settings"] = dict(_SETTINGS_DEFAULTS)
        else:
            for key, default in _SETTINGS_DEFAULTS.items():
                if key not in data["settings"] or not _valid_setting(key, data["settings"][key]):
                    defaulted_values.add(f"settings.{key}")
                    data["settings"][key] = default

        # Log results
        if defaulted_values:
            log.warning(f"Loaded settings from '{SETTINGS_PATH}', but with missing or invalid values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return data
    # Fall back to fresh settings in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to default settings.", exc_info=True)
        return build_default_settings()

# Write the given settings dict to SETTINGS_PATH
def save_settings(data):
    data.setdefault("meta", {})["saved_at"] = now_iso()
    data["meta"].setdefault("schema_version", _SCHEMA_VERSION)
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Settings ===
