# Application settings
import logging
import json
import os

# utils.logger reads LOGGING_LEVEL from this module, so plain logging is used here
logger = logging.getLogger(__name__)

# --- Configuration File ---
CONFIG_DIR = os.path.dirname(__file__)
USER_SETTINGS_PATH = os.environ.get(
    "IMAGE_ADJUSTER_SETTINGS", os.path.join(CONFIG_DIR, "user_settings.json")
)

# --- Helper Function to Load Settings ---
def load_user_settings(path):
    """Loads settings from a JSON file, returning an empty dict if not found or invalid."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError):
        logger.exception("Could not load user settings from %s", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring user settings in %s: top level must be an object", path)
        return {}
    return data

# --- Load User Settings ---
user_settings = load_user_settings(USER_SETTINGS_PATH)

# --- Analysis Parameters (Defaults) ---
_ANALYSIS_DEFAULTS_BASE = {
    # One set of limits is computed per percentage, used for both the dark and light end
    "cutoff_percentages": [0.0, 1.0],
    # "byte" rounds luminance per pixel, "real" only rounds when bucketing
    "luminance_mode": "byte",
    # Row-range workers for histogram / lookup table passes (1 = single-threaded)
    "workers": 1,
}

# --- Adjustment / Output Parameters (Defaults) ---
_ADJUSTMENT_DEFAULTS_BASE = {
    "output_dir_name": "Adjusted",
    "adjusted_suffix": "-Adjusted",
    "report_prefix": "Analyzed-",
    "log_prefix": "Adjusted-",
    "jpeg_quality": 95,
    "png_compression": 6,
}

# --- Logging (Base) ---
_LOGGING_LEVEL_BASE = "INFO" # Options: DEBUG, INFO, WARNING, ERROR

# --- Apply User Overrides ---
# User settings take precedence. Only top-level keys of each section are merged.
ANALYSIS_DEFAULTS = _ANALYSIS_DEFAULTS_BASE.copy()
ANALYSIS_DEFAULTS.update(user_settings.get("ANALYSIS_DEFAULTS", {}))

ADJUSTMENT_DEFAULTS = _ADJUSTMENT_DEFAULTS_BASE.copy()
ADJUSTMENT_DEFAULTS.update(user_settings.get("ADJUSTMENT_DEFAULTS", {}))

LOGGING_LEVEL = user_settings.get("LOGGING_LEVEL", _LOGGING_LEVEL_BASE)

# Store base defaults separately to allow resetting/reloading
_BASE_ANALYSIS_DEFAULTS = _ANALYSIS_DEFAULTS_BASE.copy()
_BASE_ADJUSTMENT_DEFAULTS = _ADJUSTMENT_DEFAULTS_BASE.copy()
_BASE_LOGGING_LEVEL = _LOGGING_LEVEL_BASE


def reload_settings():
    """Reload settings from disk and update in-memory variables.

    The dictionaries are updated in place, so modules holding a reference to
    ANALYSIS_DEFAULTS / ADJUSTMENT_DEFAULTS see the new values.
    """
    global user_settings, LOGGING_LEVEL

    logger.info("Reloading user settings from %s", USER_SETTINGS_PATH)
    user_settings = load_user_settings(USER_SETTINGS_PATH)

    new_analysis = _BASE_ANALYSIS_DEFAULTS.copy()
    new_analysis.update(user_settings.get("ANALYSIS_DEFAULTS", {}))
    ANALYSIS_DEFAULTS.clear()
    ANALYSIS_DEFAULTS.update(new_analysis)

    new_adjustment = _BASE_ADJUSTMENT_DEFAULTS.copy()
    new_adjustment.update(user_settings.get("ADJUSTMENT_DEFAULTS", {}))
    ADJUSTMENT_DEFAULTS.clear()
    ADJUSTMENT_DEFAULTS.update(new_adjustment)

    LOGGING_LEVEL = user_settings.get("LOGGING_LEVEL", _BASE_LOGGING_LEVEL)

    # Apply new logging level immediately
    from ..utils.logger import set_log_level
    set_log_level(LOGGING_LEVEL)

    logger.info("Settings reloaded. Logging level=%s", LOGGING_LEVEL)


def save_user_settings(settings_dict):
    """Saves the provided dictionary to the user settings JSON file."""
    save_data = {}
    # Only save sections that were actually provided
    for section in ("ANALYSIS_DEFAULTS", "ADJUSTMENT_DEFAULTS", "LOGGING_LEVEL"):
        if section in settings_dict:
            save_data[section] = settings_dict[section]

    try:
        with open(USER_SETTINGS_PATH, 'w', encoding='utf-8') as f:
            json.dump(save_data, f, indent=4)
        logger.info("User settings saved to %s", USER_SETTINGS_PATH)
        return True
    except IOError:
        logger.exception("Could not save user settings to %s", USER_SETTINGS_PATH)
        return False
