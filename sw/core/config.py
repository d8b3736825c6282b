import json
from sw.common.logger import log
from sw.common.setup import PATHS
from sw.core.export import ExportFormat
from sw.util import now_iso


#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.data / "settings.json"

# Every persisted setting with its default value and the type(s) a loaded value must have to be kept.
_SETTINGS_DEFAULTS = {
    "dark_mode": False,
    "always_on_top": False,
    "presets_ms": [30_000, 60_000, 300_000, 600_000],
    "export_dir": None,
    "export_format": "csv",
}
_SETTINGS_TYPES = {
    "dark_mode": bool,
    "always_on_top": bool,
    "presets_ms": list,
    "export_dir": (str, type(None)),
    "export_format": str,
}

# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    settings = {key: (list(value) if isinstance(value, list) else value)
                for key, value in _SETTINGS_DEFAULTS.items()}
    settings["saved_at"] = now_iso()
    return settings

# Presets must be positive whole milliseconds, anything else is dropped.
def _clean_presets(presets):
    return [int(p) for p in presets if isinstance(p, int) and not isinstance(p, bool) and p > 0]

#endregion === Helpers and Paths ===

#region === Saving and Loading Settings ===

# Loads settings from SETTINGS_PATH, filling in defaults for anything missing or of the wrong type. Never raises,
# a broken file just means a fresh default dict (and a warning in the log).
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            log.info("No existing settings.json found, loading fresh settings dict.")
            return build_default_settings()

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            settings = json.load(f)
        if not isinstance(settings, dict):
            raise TypeError(f"settings.json holds a {type(settings).__name__}, expected an object")

        defaulted_values = set()
        for key, default in _SETTINGS_DEFAULTS.items():
            if key not in settings or not isinstance(settings[key], _SETTINGS_TYPES[key]):
                defaulted_values.add(key)
                settings[key] = list(default) if isinstance(default, list) else default

        presets = _clean_presets(settings["presets_ms"])
        if len(presets) != len(settings["presets_ms"]):
            defaulted_values.add("presets_ms")
        settings["presets_ms"] = presets or list(_SETTINGS_DEFAULTS["presets_ms"])

        # Stored as the file extension, whatever spelling was written
        try:
            settings["export_format"] = ExportFormat.parse(settings["export_format"]).extension
        except ValueError:
            defaulted_values.add("export_format")
            settings["export_format"] = _SETTINGS_DEFAULTS["export_format"]

        if defaulted_values:
            log.warning(f"Successfully loaded settings from '{SETTINGS_PATH}', but with missing values that were "
                        f"defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return settings
    # Fall back to fresh settings in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to fresh settings.",exc_info=True)
        return build_default_settings()

# Write the given settings to disk under SETTINGS_PATH
def save_settings(settings):
    settings["saved_at"] = now_iso()
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Settings ===
