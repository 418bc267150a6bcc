# smart_sorter/core/config_manager.py

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / 'config' / 'settings.json'

# Built-in values used for every key the settings file does not provide.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "theme": "dark_theme.qss",
    "organizer": {
        "properties": ["EquipMake", "EquipModel"],
        "filter": None,
        "include": [],
        "exclude": [],
        "recurse": False,
        "hide_progress": False,
        "duplicates": "replace",
    },
}


# Accepted values of organizer.duplicates, matching the CLI --duplicates choices.
DUPLICATE_CHOICES = ("replace", "skip", "append")


def _merged(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of defaults with overrides applied, one level of nesting deep."""
    result = json.loads(json.dumps(defaults))
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key].update(value)
        else:
            result[key] = value
    return result


def _checked(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Replaces organizer values of the wrong shape with their defaults, logging each one."""
    defaults = DEFAULT_SETTINGS["organizer"]
    if not isinstance(settings.get("organizer"), dict):
        logger.warning("Settings key 'organizer' must be a JSON object. Using defaults.")
        settings["organizer"] = json.loads(json.dumps(defaults))
        return settings

    organizer = settings["organizer"]
    duplicates = organizer.get("duplicates")
    if isinstance(duplicates, str) and duplicates.lower() in DUPLICATE_CHOICES:
        organizer["duplicates"] = duplicates.lower()
    else:
        logger.warning(f"Unknown 'duplicates' value {duplicates!r} in settings. Using '{defaults['duplicates']}'.")
        organizer["duplicates"] = defaults["duplicates"]
    return settings


def load_settings(settings_path: Path | None = None) -> Dict[str, Any]:
    """
    Loads the settings file, falling back to the built-in defaults for any
    missing key. A missing or unreadable file never stops the application.
    """
    settings_path = settings_path or DEFAULT_SETTINGS_PATH
    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings root must be a JSON object")
        logger.debug(f"Loaded settings from: {settings_path}")
        return _checked(_merged(DEFAULT_SETTINGS, data))
    except FileNotFoundError:
        logger.debug(f"No settings file at '{settings_path}', using defaults.")
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read settings file '{settings_path}': {e}. Using defaults.")
    return _merged(DEFAULT_SETTINGS, {})


def save_settings(settings: Dict[str, Any], settings_path: Path | None = None) -> bool:
    """
    Writes the settings file. The previous file is backed up first and put
    back if the write fails, so a crash never leaves a half-written file.
    """
    settings_path = settings_path or DEFAULT_SETTINGS_PATH
    backup_path = settings_path.with_suffix(".json.bak")
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        if settings_path.exists():
            shutil.copy(settings_path, backup_path)
            logger.debug(f"Settings backup created at: {backup_path}")

        with open(settings_path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.info(f"Settings saved to: {settings_path}")
        return True

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save settings: {e}", exc_info=True)
        if backup_path.exists():
            shutil.copy(backup_path, settings_path)
            logger.warning("Restored settings from backup due to a save failure.")
        return False


def update_organizer_defaults(values: Dict[str, Any], settings_path: Path | None = None) -> bool:
    """Remembers the organizer options the user last ran with."""
    settings = load_settings(settings_path)
    settings["organizer"].update(values)
    return save_settings(settings, settings_path)
